from __future__ import annotations

import logging
from typing import Optional

from attr import frozen, field

from fix_table_azure.azure_client import MicrosoftClient
from fix_table_azure.config import AzureConfig, AzureCredentials

log = logging.getLogger("fix.tables.azure")


@frozen(eq=False)
class AzureSession:
    """
    Everything a table function needs to talk to one subscription.
    The client is created once per session and shared by all concurrent calls of a query.
    """

    config: AzureConfig
    subscription_id: str
    credential: AzureCredentials = field(repr=False)
    client: MicrosoftClient = field(repr=False)
    account: Optional[str] = None

    @property
    def cloud_environment(self) -> str:
        return self.config.environment.name

    @staticmethod
    def create(
        config: AzureConfig,
        subscription_id: str,
        credential: AzureCredentials,
        account: Optional[str] = None,
    ) -> AzureSession:
        log.debug(f"[Azure] Create session for subscription {subscription_id} (account={account})")
        client = MicrosoftClient.create(config, credential, subscription_id)
        return AzureSession(config, subscription_id, credential, client, account)
