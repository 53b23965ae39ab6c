from typing import ClassVar, Optional, Dict, List, Union

import yaml
from attr import define, field, frozen
from azure.identity import AzureAuthorityHosts, DefaultAzureCredential, ClientSecretCredential

from fixlib.json import from_json
from fixlib.types import Json

AzureCredentials = Union[DefaultAzureCredential, ClientSecretCredential]


@frozen
class AzureCloudEnvironment:
    name: str
    resource_manager: str
    authority_host: str

    @property
    def credential_scope(self) -> str:
        return f"{self.resource_manager}/.default"


CloudEnvironments: Dict[str, AzureCloudEnvironment] = {
    env.name.lower(): env
    for env in [
        AzureCloudEnvironment(
            "AzurePublicCloud", "https://management.azure.com", AzureAuthorityHosts.AZURE_PUBLIC_CLOUD
        ),
        AzureCloudEnvironment(
            "AzureChinaCloud", "https://management.chinacloudapi.cn", AzureAuthorityHosts.AZURE_CHINA
        ),
        AzureCloudEnvironment(
            "AzureUSGovernmentCloud", "https://management.usgovcloudapi.net", AzureAuthorityHosts.AZURE_GOVERNMENT
        ),
    ]
}


@define
class AzureClientSecretConfig:
    kind: ClassVar[str] = "azure_client_secret"
    tenant_id: str = field(metadata={"description": "Azure tenant ID"})
    client_id: str = field(metadata={"description": "Azure client ID"})
    client_secret: str = field(metadata={"description": "Azure client secret"})


@define
class AzureAccountConfig:
    kind: ClassVar[str] = "azure_account"

    client_secret: Optional[AzureClientSecretConfig] = field(
        default=None,
        metadata={
            "description": "If you can not provide access via the environment, define access with a client secret.\nIf no secret is provided the default credential chain will be used.\nSee https://docs.microsoft.com/en-us/azure/developer/python/azure-sdk-authenticate?tabs=cmd#environment-variables for more information."  # noqa: E501
        },
    )
    subscriptions: Optional[List[str]] = field(
        default=None, metadata={"description": "If not defined, all subscriptions that are found will be queried."}
    )
    exclude_subscriptions: Optional[List[str]] = field(
        default=None, metadata={"description": "Subscriptions to exclude"}
    )

    def credentials(self, environment: Optional[AzureCloudEnvironment] = None) -> AzureCredentials:
        authority = environment.authority_host if environment else AzureAuthorityHosts.AZURE_PUBLIC_CLOUD
        if cs := self.client_secret:
            return ClientSecretCredential(
                tenant_id=cs.tenant_id,
                client_id=cs.client_id,
                client_secret=cs.client_secret,
                authority=authority,
            )

        return DefaultAzureCredential(process_timeout=300, authority=authority)

    def allowed(self, subscription_id: str) -> bool:
        if self.subscriptions is not None:
            return subscription_id in self.subscriptions
        if self.exclude_subscriptions is not None:
            return subscription_id not in self.exclude_subscriptions
        return True


@define
class AzureConfig:
    kind: ClassVar[str] = "azure"

    accounts: Optional[Dict[str, AzureAccountConfig]] = field(
        factory=lambda: {"default": AzureAccountConfig()},
        metadata={"description": "Configure accounts to query subscriptions. You can define multiple accounts here."},
    )

    cloud_environment: str = field(
        default="AzurePublicCloud",
        metadata={
            "description": "The Azure cloud to talk to. "
            "One of AzurePublicCloud, AzureChinaCloud or AzureUSGovernmentCloud."
        },
    )

    request_timeout: float = field(
        default=120,
        metadata={"description": "Upper bound in seconds for a single request against the Azure API."},
    )

    hydrate_pool_size: int = field(
        default=8,
        metadata={"description": "Number of threads per query used to compute enriched columns of a row."},
    )

    fail_row_on_column_error: bool = field(
        default=True,
        metadata={
            "description": "Fail the whole row if computing an enriched column fails. "
            "If false, the error is logged and the column is left empty."
        },
    )

    @property
    def environment(self) -> AzureCloudEnvironment:
        if env := CloudEnvironments.get(self.cloud_environment.lower()):
            return env
        raise ValueError(
            f"Unknown cloud environment {self.cloud_environment}. "
            f"Use one of {', '.join(e.name for e in CloudEnvironments.values())}"
        )


def load_config(path: str) -> AzureConfig:
    with open(path) as f:
        js: Optional[Json] = yaml.safe_load(f)
    if not js:
        return AzureConfig()
    # the azure section can be nested or define the whole file
    return from_json(js.get(AzureConfig.kind, js), AzureConfig)
