import logging
import time
from threading import Event
from typing import Any, Dict, Iterator, List, Optional, Sequence, Type, TypeVar

from fix_table_azure.azure_client import MicrosoftClient
from fix_table_azure.config import AzureConfig, AzureAccountConfig, AzureCredentials
from fix_table_azure.resource.base import AzureSubscription, MicrosoftResource
from fix_table_azure.resource.sql_server import tables as sql_server_tables
from fix_table_azure.session import AzureSession
from fix_table_azure.table import QueryContext, Table
from fixlib.types import Json

log = logging.getLogger("fix.tables.azure")
T = TypeVar("T", bound=MicrosoftResource)

all_tables: List[Table] = [*sql_server_tables]


class AzureTablePlugin:
    cloud = "azure"

    def __init__(self, config: Optional[AzureConfig] = None) -> None:
        self.config = config or AzureConfig()

    @staticmethod
    def tables() -> Dict[str, Table]:
        return {table.name: table for table in all_tables}

    def table(self, name: str) -> Table:
        if table := self.tables().get(name):
            return table
        raise KeyError(f"Unknown table {name}. Available: {', '.join(sorted(self.tables()))}")

    def sessions(self, subscription: Optional[str] = None) -> List[AzureSession]:
        """
        One session per allowed subscription of every configured account.
        Subscriptions are listed via the api, if the account does not name them explicitly.
        """
        environment = self.config.environment
        # In case no account is configured, fallback to default settings
        account_configs = self.config.accounts or {"default": AzureAccountConfig()}
        result: Dict[str, AzureSession] = {}
        for name, ac in account_configs.items():
            credentials = ac.credentials(environment)
            if ac.subscriptions is not None:
                subscription_ids = list(ac.subscriptions)
            else:
                subscription_ids = [
                    s.subscription_id
                    for s in list_all(AzureSubscription, self.config, credentials)
                    if s.subscription_id
                ]
            for sid in subscription_ids:
                if sid in result or not ac.allowed(sid) or (subscription is not None and sid != subscription):
                    continue
                result[sid] = AzureSession.create(self.config, sid, credentials, name)
        log.debug(f"[Azure] Query subscriptions: {', '.join(result)}")
        return list(result.values())

    def query(
        self,
        table: str,
        *,
        subscription: Optional[str] = None,
        equals_quals: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        columns: Optional[Sequence[str]] = None,
        timeout: Optional[float] = None,
        cancelled: Optional[Event] = None,
    ) -> Iterator[Json]:
        """
        Stream the rows of the given table for all subscriptions.
        The limit is applied across all subscriptions. Timeout and cancellation apply to the whole query.
        """
        tbl = self.table(table)
        deadline = time.monotonic() + timeout if timeout is not None else None
        cancel_event = cancelled or Event()
        remaining = limit
        for session in self.sessions(subscription):
            if remaining is not None and remaining <= 0:
                return
            ctx = QueryContext(
                cancelled=cancel_event,
                deadline=deadline,
                session=session,
                equals_quals=dict(equals_quals or {}),
                limit=remaining,
            )
            for row in tbl.rows(ctx, columns):
                yield row
                if remaining is not None:
                    remaining -= 1


def list_all(resource: Type[T], config: AzureConfig, credentials: AzureCredentials) -> List[T]:
    if resource.api_spec is None:
        return []
    client = MicrosoftClient.create(config, credentials, "global")
    return [rs for js in client.list(resource.api_spec) if (rs := resource.from_api(js))]
