from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import List, Optional, Any, Iterator, Iterable, cast

from attr import define, field
from azure.core.exceptions import (
    AzureError,
    ClientAuthenticationError,
    ResourceNotFoundError,
    map_error,
    HttpResponseError,
)
from azure.core.rest import HttpRequest, HttpResponse
from azure.core.utils import case_insensitive_dict
from azure.mgmt.core.exceptions import ARMErrorFormat
from azure.mgmt.resource.resources import ResourceManagementClient

from fix_table_azure.config import AzureConfig, AzureCredentials
from fix_table_azure.utils import case_insensitive_eq
from fixlib.types import Json, JsonElement

log = logging.getLogger("fix.tables.azure")

NextPageProps = ["nextLink", "NextPageLink", "@odata.nextLink"]
ErrorMap = {
    401: ClientAuthenticationError,
    404: ResourceNotFoundError,
}


class QueryCancelledError(AzureError):
    """Raised when a backend call is attempted after the query was cancelled or ran out of time."""


@define(eq=False)
class CallContext:
    """
    Cancellation signal and deadline of one query.
    Every backend call checks it before a request is sent and bounds the request timeout by the remaining time.
    """

    cancelled: threading.Event = field(factory=threading.Event)
    # absolute point in time (time.monotonic) when the query has to be done
    deadline: Optional[float] = None

    def cancel(self) -> None:
        self.cancelled.set()

    def remaining(self) -> Optional[float]:
        return None if self.deadline is None else self.deadline - time.monotonic()

    def check(self, action: str) -> None:
        if self.cancelled.is_set():
            raise QueryCancelledError(f"Query cancelled. Skip {action}")
        if (remaining := self.remaining()) is not None and remaining <= 0:
            raise QueryCancelledError(f"Query deadline exceeded. Skip {action}")

    def timeout(self, upper_bound: float) -> float:
        remaining = self.remaining()
        return upper_bound if remaining is None else max(0.0, min(upper_bound, remaining))

    @staticmethod
    def with_timeout(seconds: float) -> CallContext:
        return CallContext(deadline=time.monotonic() + seconds)


def is_not_found_error(e: Exception, not_found_codes: Iterable[str]) -> bool:
    """
    True if the given error signals the absence of the requested resource.
    Codes are either Azure error codes (e.g. ResourceNotFound) or HTTP status codes as string (e.g. 404).
    """
    if not isinstance(e, HttpResponseError):
        return False
    error_code = getattr(e.error, "code", None)
    status_code = getattr(e, "status_code", None)
    for code in not_found_codes:
        if case_insensitive_eq(code, error_code) or (status_code is not None and code == str(status_code)):
            return True
    return False


@define
class AzureResourceSpec:
    service: str
    path: str
    version: str
    path_parameters: List[str] = []
    query_parameters: List[str] = []
    access_path: Optional[str] = None
    expect_array: bool = False

    def request(self, client: MicrosoftResourceManagementClient, **kwargs: Any) -> HttpRequest:
        # Construct lookup map used to fill query and path parameters
        lookup_map = {"subscriptionId": client.subscription_id, **kwargs}

        # Construct the path map
        path_map = case_insensitive_dict()
        for param in self.path_parameters:
            if lookup_map.get(param, None) is not None:
                path_map[param] = lookup_map[param]
            else:
                raise KeyError(
                    f"{self.service}:{self.path}: Path parameter {param} was not provided as argument. {lookup_map}"
                )

        # Construct parameters
        params = case_insensitive_dict()
        params["api-version"] = self.version
        for param in self.query_parameters:
            if param not in params:
                if lookup_map.get(param, None) is not None:
                    params[param] = lookup_map[param]
                else:
                    raise KeyError(f"Query parameter {param} was not provided as argument")

        # Construct url
        path = self.path.format_map(path_map)
        url = client.resource_management_client._client.format_url(path)  # pylint: disable=protected-access
        return HttpRequest(method="GET", url=url, params=params)

    @property
    def action(self) -> str:
        return self.path


class MicrosoftClient(ABC):
    @abstractmethod
    def iterate(self, spec: AzureResourceSpec, call: Optional[CallContext] = None, **kwargs: Any) -> Iterator[Json]:
        """
        Lazily walk all pages of a list call and yield the items one by one.
        The next page is only requested when the consumer asks for the next item.
        """

    def list(self, spec: AzureResourceSpec, call: Optional[CallContext] = None, **kwargs: Any) -> List[Json]:
        return list(self.iterate(spec, call, **kwargs))

    @abstractmethod
    def get(self, spec: AzureResourceSpec, call: Optional[CallContext] = None, **kwargs: Any) -> Optional[Json]:
        pass

    @staticmethod
    def __create_management_client(
        config: AzureConfig,
        credential: AzureCredentials,
        subscription_id: str,
    ) -> MicrosoftClient:
        return MicrosoftResourceManagementClient(config, credential, subscription_id)

    create = __create_management_client


class MicrosoftResourceManagementClient(MicrosoftClient):
    def __init__(self, config: AzureConfig, credential: AzureCredentials, subscription_id: str) -> None:
        self.config = config
        self.credential = credential
        self.subscription_id = subscription_id
        env = config.environment
        self.resource_management_client = ResourceManagementClient(
            self.credential,
            self.subscription_id,
            base_url=env.resource_manager,
            credential_scopes=[env.credential_scope],
        )

    def iterate(self, spec: AzureResourceSpec, call: Optional[CallContext] = None, **kwargs: Any) -> Iterator[Json]:
        for page in self._pages(spec, call or CallContext(), **kwargs):
            yield from page

    def get(self, spec: AzureResourceSpec, call: Optional[CallContext] = None, **kwargs: Any) -> Optional[Json]:
        call = call or CallContext()
        request = spec.request(self, **kwargs)
        js = self._json(spec, request, call)
        if isinstance(js, dict) and spec.access_path:
            js = js.get(spec.access_path)
        return cast(Optional[Json], js)

    def _pages(self, spec: AzureResourceSpec, call: CallContext, **kwargs: Any) -> Iterator[List[Json]]:
        # Walk all pages if necessary
        next_page_request: Optional[HttpRequest] = spec.request(self, **kwargs)
        page = 0
        while next_page_request:
            js = self._json(spec, next_page_request, call)

            # is there a next page?
            np_url = next((npp for np in NextPageProps if isinstance(js, dict) and (npp := js.get(np))), None)
            next_page_request = HttpRequest(next_page_request.method, np_url) if np_url else None

            # access the right path
            js = js.get(spec.access_path) if spec.access_path and isinstance(js, dict) else js

            # ensure it is an array if required
            if js is None:
                js = []
            elif spec.expect_array and not isinstance(js, list):
                js = [js]
            elif not isinstance(js, list):
                raise ValueError(f"{spec.service}:{spec.path}: Expected array in page {page}, got {type(js)}")

            page += 1
            log.debug(f"[Azure] {spec.service}: page {page} of {spec.action} returned {len(js)} items")
            yield js

    def _json(self, spec: AzureResourceSpec, request: HttpRequest, call: CallContext) -> JsonElement:
        call.check(f"{spec.service}:{spec.action}")
        response = self._send(request, call)
        # Handle error responses
        if response.status_code not in [200]:
            map_error(status_code=response.status_code, response=response, error_map=ErrorMap)
            raise HttpResponseError(response=response, error_format=ARMErrorFormat)
        # some apis answer a missing resource with an empty body
        return response.json() if response.content else None

    def _send(self, request: HttpRequest, call: CallContext) -> HttpResponse:
        timeout = call.timeout(self.config.request_timeout)
        log.debug(f"[Azure] GET {request.url} (timeout={timeout:.1f}s)")
        pipeline_response = self.resource_management_client._client._pipeline.run(  # noqa
            request, stream=False, connection_timeout=timeout, read_timeout=timeout
        )
        return cast(HttpResponse, pipeline_response.http_response)

    def __repr__(self) -> str:
        return f"MicrosoftResourceManagementClient(subscription_id={self.subscription_id})"
