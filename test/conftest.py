from __future__ import annotations

import json
import os
from typing import Any, Iterator, List, Optional, Tuple

from azure.core.exceptions import HttpResponseError, ODataV4Format
from azure.core.rest import HttpRequest
from azure.identity import DefaultAzureCredential
from pytest import fixture

from fix_table_azure.azure_client import (
    AzureResourceSpec,
    CallContext,
    MicrosoftClient,
    MicrosoftResourceManagementClient,
)
from fix_table_azure.config import AzureConfig, AzureCredentials
from fix_table_azure.session import AzureSession
from fix_table_azure.table import QueryContext
from fixlib.types import Json

SubscriptionId = "sub-1"


def http_error(status_code: int, code: str, message: str = "test error") -> HttpResponseError:
    e = HttpResponseError(f"({code}) {message}")
    e.status_code = status_code
    e.error = ODataV4Format({"error": {"code": code, "message": message}})
    return e


class StaticFileMicrosoftClient(MicrosoftClient):
    """
    Serves the content of test/files/<service>/<last path segment>.json.
    A missing file is answered like the api answers a missing resource.
    """

    def __init__(self) -> None:
        self.requested: List[str] = []

    def _load(self, spec: AzureResourceSpec, call: Optional[CallContext], **kwargs: Any) -> Any:
        (call or CallContext()).check(spec.action)
        path = spec.path.format_map({"subscriptionId": SubscriptionId, **kwargs})
        self.requested.append(path)
        last = path.rstrip("/").rsplit("/", maxsplit=1)[-1]
        file = os.path.dirname(__file__) + f"/files/{spec.service}/{last}.json"
        if not os.path.exists(file):
            raise http_error(404, "ResourceNotFound", f"The Resource {path} was not found.")
        with open(file) as f:
            return json.load(f)

    def iterate(self, spec: AzureResourceSpec, call: Optional[CallContext] = None, **kwargs: Any) -> Iterator[Json]:
        js = self._load(spec, call, **kwargs)
        if spec.access_path and isinstance(js, dict):
            js = js.get(spec.access_path)
        if js is None:
            return
        yield from (js if isinstance(js, list) else [js])

    def get(self, spec: AzureResourceSpec, call: Optional[CallContext] = None, **kwargs: Any) -> Optional[Json]:
        js = self._load(spec, call, **kwargs)
        return js if js else None

    @staticmethod
    def create(*args: Any, **kwargs: Any) -> StaticFileMicrosoftClient:
        return StaticFileMicrosoftClient()


class FakeResponse:
    def __init__(self, status_code: int, body: Optional[Json] = None) -> None:
        self.status_code = status_code
        self.reason = "OK" if status_code == 200 else "Error"
        self.content = json.dumps(body).encode("utf-8") if body is not None else b""
        self.headers: Json = {"Content-Type": "application/json"}
        self.content_type = "application/json"

    def text(self, encoding: Optional[str] = None) -> str:
        return self.content.decode("utf-8")

    def json(self) -> Any:
        return json.loads(self.content)


class FakeTransportClient(MicrosoftResourceManagementClient):
    """
    The real resource management client, but every request is answered from the given list of responses.
    """

    def __init__(self, config: AzureConfig, credential: AzureCredentials, responses: List[FakeResponse]) -> None:
        super().__init__(config, credential, SubscriptionId)
        self.responses = responses
        self.sent: List[Tuple[str, float]] = []

    def _send(self, request: HttpRequest, call: CallContext) -> Any:
        self.sent.append((request.url, call.timeout(self.config.request_timeout)))
        if not self.responses:
            raise AssertionError(f"Unexpected request: {request.url}")
        return self.responses.pop(0)


@fixture
def config() -> AzureConfig:
    return AzureConfig()


@fixture
def credentials() -> DefaultAzureCredential:
    return DefaultAzureCredential()


@fixture
def azure_client() -> Iterator[StaticFileMicrosoftClient]:
    original = MicrosoftClient.create
    MicrosoftClient.create = StaticFileMicrosoftClient.create  # type: ignore
    yield StaticFileMicrosoftClient()
    MicrosoftClient.create = original  # type: ignore


@fixture
def session(config: AzureConfig, credentials: AzureCredentials, azure_client: MicrosoftClient) -> AzureSession:
    return AzureSession(config, SubscriptionId, credentials, azure_client, "default")


@fixture
def ctx(session: AzureSession) -> QueryContext:
    return QueryContext(session=session)
