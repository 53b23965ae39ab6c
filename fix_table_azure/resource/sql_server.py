import logging
from datetime import datetime
from typing import ClassVar, Dict, Iterator, List, Optional, Type, TypeVar

from attr import define, field

from fix_table_azure.azure_client import AzureResourceSpec
from fix_table_azure.resource.base import (
    AzurePrivateLinkServiceConnectionState,
    AzureResourceIdentity,
    AzureSystemData,
    MicrosoftResource,
    ResourceReference,
    azure_columns,
    parent_identity,
)
from fix_table_azure.table import Column, ColumnType, GetConfig, ListConfig, QueryContext, Table
from fixlib.json_bender import Bender, Bend, S

log = logging.getLogger("fix.tables.azure")

SqlApiVersion = "2021-11-01"


def server_child_spec(path_part: str, version: str = SqlApiVersion) -> AzureResourceSpec:
    return AzureResourceSpec(
        service="sql",
        version=version,
        path="/subscriptions/{subscriptionId}/resourceGroups/{resourceGroupName}/providers/Microsoft.Sql/servers/{serverName}/"  # noqa: E501
        + path_part,
        path_parameters=["subscriptionId", "resourceGroupName", "serverName"],
        query_parameters=["api-version"],
        access_path="value",
        expect_array=True,
    )


@define(eq=False, slots=False)
class AzureSqlServerChildResource(MicrosoftResource):
    kind: ClassVar[str] = "azure_sql_server_child_resource"

    @classmethod
    def list_by_server(
        cls: Type["SqlServerChildType"], ctx: QueryContext, server: ResourceReference
    ) -> List["SqlServerChildType"]:
        """
        Walks all pages of the list-by-server api of this kind and returns all items of the given server.
        """
        if cls.api_spec is None:
            raise ValueError(f"{cls.__name__} has no api spec")
        resource_group, server_name = parent_identity(server)
        log.debug(f"[Azure:{ctx.session.subscription_id}] Collecting {cls.__name__} of {resource_group}/{server_name}")
        items = ctx.client.list(cls.api_spec, ctx, resourceGroupName=resource_group, serverName=server_name)
        return cls.collect(items)


SqlServerChildType = TypeVar("SqlServerChildType", bound=AzureSqlServerChildResource)


@define(eq=False, slots=False)
class AzureSqlServerBlobAuditingPolicy(AzureSqlServerChildResource):
    kind: ClassVar[str] = "azure_sql_server_blob_auditing_policy"
    api_spec: ClassVar[AzureResourceSpec] = server_child_spec("auditingSettings")
    mapping: ClassVar[Dict[str, Bender]] = {
        "id": S("id"),
        "name": S("name"),
        "type": S("type"),
        "audit_actions_and_groups": S("properties", "auditActionsAndGroups"),
        "is_azure_monitor_target_enabled": S("properties", "isAzureMonitorTargetEnabled"),
        "is_devops_audit_enabled": S("properties", "isDevopsAuditEnabled"),
        "is_managed_identity_in_use": S("properties", "isManagedIdentityInUse"),
        "is_storage_secondary_key_in_use": S("properties", "isStorageSecondaryKeyInUse"),
        "queue_delay_ms": S("properties", "queueDelayMs"),
        "retention_days": S("properties", "retentionDays"),
        "state": S("properties", "state"),
        "storage_account_access_key": S("properties", "storageAccountAccessKey"),
        "storage_account_subscription_id": S("properties", "storageAccountSubscriptionId"),
        "storage_endpoint": S("properties", "storageEndpoint"),
    }
    audit_actions_and_groups: Optional[List[str]] = field(default=None, metadata={'description': 'Specifies the Actions-Groups and Actions to audit.'})  # fmt: skip
    is_azure_monitor_target_enabled: Optional[bool] = field(default=None, metadata={'description': 'Specifies whether audit events are sent to Azure Monitor.'})  # fmt: skip
    is_devops_audit_enabled: Optional[bool] = field(default=None, metadata={'description': 'Specifies the state of devops audit. If state is Enabled, devops logs will be sent to Azure Monitor.'})  # fmt: skip
    is_managed_identity_in_use: Optional[bool] = field(default=None, metadata={'description': 'Specifies whether Managed Identity is used to access blob storage'})  # fmt: skip
    is_storage_secondary_key_in_use: Optional[bool] = field(default=None, metadata={'description': 'Specifies whether storageAccountAccessKey value is the storage s secondary key.'})  # fmt: skip
    queue_delay_ms: Optional[int] = field(default=None, metadata={'description': 'Specifies the amount of time in milliseconds that can elapse before audit actions are forced to be processed.'})  # fmt: skip
    retention_days: Optional[int] = field(default=None, metadata={'description': 'Specifies the number of days to keep in the audit logs in the storage account.'})  # fmt: skip
    state: Optional[str] = field(default=None, metadata={'description': 'Specifies the state of the audit. If state is Enabled, storageEndpoint or isAzureMonitorTargetEnabled are required.'})  # fmt: skip
    storage_account_access_key: Optional[str] = field(default=None, metadata={'description': 'Specifies the identifier key of the auditing storage account.'})  # fmt: skip
    storage_account_subscription_id: Optional[str] = field(default=None, metadata={'description': 'Specifies the blob storage subscription Id.'})  # fmt: skip
    storage_endpoint: Optional[str] = field(default=None, metadata={'description': 'Specifies the blob storage endpoint (e.g. https://MyAccount.blob.core.windows.net).'})  # fmt: skip


@define(eq=False, slots=False)
class AzureSqlServerSecurityAlertPolicy(AzureSqlServerChildResource):
    kind: ClassVar[str] = "azure_sql_server_security_alert_policy"
    api_spec: ClassVar[AzureResourceSpec] = server_child_spec("securityAlertPolicies")
    mapping: ClassVar[Dict[str, Bender]] = {
        "id": S("id"),
        "name": S("name"),
        "type": S("type"),
        "system_data": S("systemData") >> Bend(AzureSystemData.mapping),
        "creation_time": S("properties", "creationTime"),
        "disabled_alerts": S("properties", "disabledAlerts"),
        "email_account_admins": S("properties", "emailAccountAdmins"),
        "email_addresses": S("properties", "emailAddresses"),
        "retention_days": S("properties", "retentionDays"),
        "state": S("properties", "state"),
        "storage_account_access_key": S("properties", "storageAccountAccessKey"),
        "storage_endpoint": S("properties", "storageEndpoint"),
    }
    system_data: Optional[AzureSystemData] = field(default=None, metadata={'description': 'Metadata pertaining to creation and last modification of the resource.'})  # fmt: skip
    creation_time: Optional[datetime] = field(default=None, metadata={'description': 'Specifies the UTC creation time of the policy.'})  # fmt: skip
    disabled_alerts: Optional[List[str]] = field(default=None, metadata={'description': 'Specifies an array of alerts that are disabled. Allowed values are: Sql_Injection, Sql_Injection_Vulnerability, Access_Anomaly, Data_Exfiltration, Unsafe_Action, Brute_Force'})  # fmt: skip
    email_account_admins: Optional[bool] = field(default=None, metadata={'description': 'Specifies that the alert is sent to the account administrators.'})  # fmt: skip
    email_addresses: Optional[List[str]] = field(default=None, metadata={'description': 'Specifies an array of e-mail addresses to which the alert is sent.'})  # fmt: skip
    retention_days: Optional[int] = field(default=None, metadata={'description': 'Specifies the number of days to keep in the Threat Detection audit logs.'})  # fmt: skip
    state: Optional[str] = field(default=None, metadata={'description': 'Specifies the state of the policy, whether it is enabled or disabled or a policy has not been applied yet on the specific database.'})  # fmt: skip
    storage_account_access_key: Optional[str] = field(default=None, metadata={'description': 'Specifies the identifier key of the Threat Detection audit storage account.'})  # fmt: skip
    storage_endpoint: Optional[str] = field(default=None, metadata={'description': 'Specifies the blob storage endpoint. This blob storage will hold all Threat Detection audit logs.'})  # fmt: skip


@define(eq=False, slots=False)
class AzureSqlServerADAdministrator(AzureSqlServerChildResource):
    kind: ClassVar[str] = "azure_sql_server_ad_administrator"
    api_spec: ClassVar[AzureResourceSpec] = server_child_spec("administrators")
    mapping: ClassVar[Dict[str, Bender]] = {
        "id": S("id"),
        "name": S("name"),
        "type": S("type"),
        "administrator_type": S("properties", "administratorType"),
        "azure_ad_only_authentication": S("properties", "azureADOnlyAuthentication"),
        "login": S("properties", "login"),
        "sid": S("properties", "sid"),
        "tenant_id": S("properties", "tenantId"),
    }
    administrator_type: Optional[str] = field(default=None, metadata={"description": "Type of the sever administrator."})  # fmt: skip
    azure_ad_only_authentication: Optional[bool] = field(default=None, metadata={'description': 'Azure Active Directory only Authentication enabled.'})  # fmt: skip
    login: Optional[str] = field(default=None, metadata={"description": "Login name of the server administrator."})
    sid: Optional[str] = field(default=None, metadata={"description": "SID (object ID) of the server administrator."})
    tenant_id: Optional[str] = field(default=None, metadata={"description": "Tenant ID of the administrator."})


@define(eq=False, slots=False)
class AzureVulnerabilityAssessmentRecurringScans:
    kind: ClassVar[str] = "azure_vulnerability_assessment_recurring_scans"
    mapping: ClassVar[Dict[str, Bender]] = {
        "email_subscription_admins": S("emailSubscriptionAdmins"),
        "emails": S("emails"),
        "is_enabled": S("isEnabled"),
    }
    email_subscription_admins: Optional[bool] = field(default=None, metadata={'description': 'Specifies that the schedule scan notification will be is sent to the subscription administrators.'})  # fmt: skip
    emails: Optional[List[str]] = field(default=None, metadata={'description': 'Specifies an array of e-mail addresses to which the scan notification is sent.'})  # fmt: skip
    is_enabled: Optional[bool] = field(default=None, metadata={"description": "Recurring scans state."})


@define(eq=False, slots=False)
class AzureSqlServerVulnerabilityAssessment(AzureSqlServerChildResource):
    kind: ClassVar[str] = "azure_sql_server_vulnerability_assessment"
    api_spec: ClassVar[AzureResourceSpec] = server_child_spec("vulnerabilityAssessments")
    mapping: ClassVar[Dict[str, Bender]] = {
        "id": S("id"),
        "name": S("name"),
        "type": S("type"),
        "recurring_scans": S("properties", "recurringScans") >> Bend(AzureVulnerabilityAssessmentRecurringScans.mapping),  # fmt: skip  # noqa: E501
        "storage_account_access_key": S("properties", "storageAccountAccessKey"),
        "storage_container_path": S("properties", "storageContainerPath"),
        "storage_container_sas_key": S("properties", "storageContainerSasKey"),
    }
    recurring_scans: Optional[AzureVulnerabilityAssessmentRecurringScans] = field(default=None, metadata={'description': 'The recurring scans settings'})  # fmt: skip
    storage_account_access_key: Optional[str] = field(default=None, metadata={'description': 'Specifies the identifier key of the storage account for vulnerability assessment scan results.'})  # fmt: skip
    storage_container_path: Optional[str] = field(default=None, metadata={'description': 'A blob storage container path to hold the scan results (e.g. https://myStorage.blob.core.windows.net/VaScans/).'})  # fmt: skip
    storage_container_sas_key: Optional[str] = field(default=None, metadata={'description': 'A shared access signature (SAS Key) that has write access to the blob container specified in storageContainerPath parameter.'})  # fmt: skip


@define(eq=False, slots=False)
class AzureSqlServerFirewallRule(AzureSqlServerChildResource):
    kind: ClassVar[str] = "azure_sql_server_firewall_rule"
    api_spec: ClassVar[AzureResourceSpec] = server_child_spec("firewallRules")
    mapping: ClassVar[Dict[str, Bender]] = {
        "id": S("id"),
        "name": S("name"),
        "type": S("type"),
        "end_ip_address": S("properties", "endIpAddress"),
        "start_ip_address": S("properties", "startIpAddress"),
    }
    end_ip_address: Optional[str] = field(default=None, metadata={'description': 'The end IP address of the firewall rule. Must be IPv4 format. Must be greater than or equal to startIpAddress. Use value 0.0.0.0 for all Azure-internal IP addresses.'})  # fmt: skip
    start_ip_address: Optional[str] = field(default=None, metadata={'description': 'The start IP address of the firewall rule. Must be IPv4 format. Use value 0.0.0.0 for all Azure-internal IP addresses.'})  # fmt: skip


@define(eq=False, slots=False)
class AzureSqlServerEncryptionProtector(AzureSqlServerChildResource):
    kind: ClassVar[str] = "azure_sql_server_encryption_protector"
    api_spec: ClassVar[AzureResourceSpec] = server_child_spec("encryptionProtector")
    mapping: ClassVar[Dict[str, Bender]] = {
        "id": S("id"),
        "name": S("name"),
        "type": S("type"),
        "location": S("location"),
        "auto_rotation_enabled": S("properties", "autoRotationEnabled"),
        "protector_kind": S("kind"),
        "server_key_name": S("properties", "serverKeyName"),
        "server_key_type": S("properties", "serverKeyType"),
        "subregion": S("properties", "subregion"),
        "thumbprint": S("properties", "thumbprint"),
        "uri": S("properties", "uri"),
    }
    location: Optional[str] = field(default=None, metadata={"description": "Resource location."})
    auto_rotation_enabled: Optional[bool] = field(default=None, metadata={'description': 'Key auto rotation opt-in flag. Either true or false.'})  # fmt: skip
    protector_kind: Optional[str] = field(default=None, metadata={'description': 'Kind of encryption protector. This is metadata used for the Azure portal experience.'})  # fmt: skip
    server_key_name: Optional[str] = field(default=None, metadata={"description": "The name of the server key."})
    server_key_type: Optional[str] = field(default=None, metadata={'description': 'The encryption protector type like ServiceManaged , AzureKeyVault .'})  # fmt: skip
    subregion: Optional[str] = field(default=None, metadata={"description": "Subregion of the encryption protector."})
    thumbprint: Optional[str] = field(default=None, metadata={"description": "Thumbprint of the server key."})
    uri: Optional[str] = field(default=None, metadata={"description": "The URI of the server key."})


@define(eq=False, slots=False)
class AzureSqlServerPrivateEndpointConnection(AzureSqlServerChildResource):
    kind: ClassVar[str] = "azure_sql_server_private_endpoint_connection"
    api_spec: ClassVar[AzureResourceSpec] = server_child_spec("privateEndpointConnections")
    mapping: ClassVar[Dict[str, Bender]] = {
        "id": S("id"),
        "name": S("name"),
        "type": S("type"),
        "group_ids": S("properties", "groupIds"),
        "private_endpoint": S("properties", "privateEndpoint", "id"),
        "private_link_service_connection_state": S("properties", "privateLinkServiceConnectionState")
        >> Bend(AzurePrivateLinkServiceConnectionState.mapping),
        "provisioning_state": S("properties", "provisioningState"),
    }
    group_ids: Optional[List[str]] = field(default=None, metadata={'description': 'Group IDs.'})  # fmt: skip
    private_endpoint: Optional[str] = field(default=None, metadata={"description": "Private endpoint which the connection belongs to."})  # fmt: skip
    private_link_service_connection_state: Optional[AzurePrivateLinkServiceConnectionState] = field(default=None, metadata={'description': 'Connection state of the private endpoint connection.'})  # fmt: skip
    provisioning_state: Optional[str] = field(default=None, metadata={'description': 'State of the private endpoint connection.'})  # fmt: skip


@define(eq=False, slots=False)
class AzureSqlServerVirtualNetworkRule(AzureSqlServerChildResource):
    kind: ClassVar[str] = "azure_sql_server_virtual_network_rule"
    api_spec: ClassVar[AzureResourceSpec] = server_child_spec("virtualNetworkRules")
    mapping: ClassVar[Dict[str, Bender]] = {
        "id": S("id"),
        "name": S("name"),
        "type": S("type"),
        "ignore_missing_vnet_service_endpoint": S("properties", "ignoreMissingVnetServiceEndpoint"),
        "state": S("properties", "state"),
        "virtual_network_subnet_id": S("properties", "virtualNetworkSubnetId"),
    }
    ignore_missing_vnet_service_endpoint: Optional[bool] = field(default=None, metadata={'description': 'Create firewall rule before the virtual network has vnet service endpoint enabled.'})  # fmt: skip
    state: Optional[str] = field(default=None, metadata={"description": "Virtual Network Rule State"})
    virtual_network_subnet_id: Optional[str] = field(default=None, metadata={'description': 'The ARM resource id of the virtual network subnet.'})  # fmt: skip


@define(eq=False, slots=False)
class AzureServerExternalAdministrator:
    kind: ClassVar[str] = "azure_server_external_administrator"
    mapping: ClassVar[Dict[str, Bender]] = {
        "administrator_type": S("administratorType"),
        "azure_ad_only_authentication": S("azureADOnlyAuthentication"),
        "login": S("login"),
        "principal_type": S("principalType"),
        "sid": S("sid"),
        "tenant_id": S("tenantId"),
    }
    administrator_type: Optional[str] = field(default=None, metadata={'description': 'Type of the sever administrator.'})  # fmt: skip
    azure_ad_only_authentication: Optional[bool] = field(default=None, metadata={'description': 'Azure Active Directory only Authentication enabled.'})  # fmt: skip
    login: Optional[str] = field(default=None, metadata={"description": "Login name of the server administrator."})
    principal_type: Optional[str] = field(default=None, metadata={'description': 'Principal Type of the sever administrator.'})  # fmt: skip
    sid: Optional[str] = field(default=None, metadata={"description": "SID (object ID) of the server administrator."})
    tenant_id: Optional[str] = field(default=None, metadata={"description": "Tenant ID of the administrator."})


@define(eq=False, slots=False)
class AzureSqlServer(MicrosoftResource):
    kind: ClassVar[str] = "azure_sql_server"
    api_spec: ClassVar[AzureResourceSpec] = AzureResourceSpec(
        service="sql",
        version=SqlApiVersion,
        path="/subscriptions/{subscriptionId}/providers/Microsoft.Sql/servers",
        path_parameters=["subscriptionId"],
        query_parameters=["api-version"],
        access_path="value",
        expect_array=True,
    )
    get_spec: ClassVar[AzureResourceSpec] = AzureResourceSpec(
        service="sql",
        version=SqlApiVersion,
        path="/subscriptions/{subscriptionId}/resourceGroups/{resourceGroupName}/providers/Microsoft.Sql/servers/{serverName}",  # noqa: E501
        path_parameters=["subscriptionId", "resourceGroupName", "serverName"],
        query_parameters=["api-version"],
    )
    mapping: ClassVar[Dict[str, Bender]] = {
        "id": S("id"),
        "tags": S("tags", default={}),
        "name": S("name"),
        "type": S("type"),
        "location": S("location"),
        "administrator_login": S("properties", "administratorLogin"),
        "administrator_login_password": S("properties", "administratorLoginPassword"),
        "server_administrators": S("properties", "administrators") >> Bend(AzureServerExternalAdministrator.mapping),
        "federated_client_id": S("properties", "federatedClientId"),
        "fully_qualified_domain_name": S("properties", "fullyQualifiedDomainName"),
        "server_identity": S("identity") >> Bend(AzureResourceIdentity.mapping),
        "key_id": S("properties", "keyId"),
        "server_kind": S("kind"),
        "minimal_tls_version": S("properties", "minimalTlsVersion"),
        "primary_user_assigned_identity_id": S("properties", "primaryUserAssignedIdentityId"),
        "public_network_access": S("properties", "publicNetworkAccess"),
        "restrict_outbound_network_access": S("properties", "restrictOutboundNetworkAccess"),
        "state": S("properties", "state"),
        "version": S("properties", "version"),
        "workspace_feature": S("properties", "workspaceFeature"),
    }
    location: Optional[str] = field(default=None, metadata={"description": "Resource location."})
    administrator_login: Optional[str] = field(default=None, metadata={'description': 'Administrator username for the server. Once created it cannot be changed.'})  # fmt: skip
    administrator_login_password: Optional[str] = field(default=None, metadata={'description': 'The administrator login password (required for server creation).'})  # fmt: skip
    server_administrators: Optional[AzureServerExternalAdministrator] = field(default=None, metadata={'description': 'Properties of a active directory administrator.'})  # fmt: skip
    federated_client_id: Optional[str] = field(default=None, metadata={'description': 'The Client id used for cross tenant CMK scenario'})  # fmt: skip
    fully_qualified_domain_name: Optional[str] = field(default=None, metadata={'description': 'The fully qualified domain name of the server.'})  # fmt: skip
    server_identity: Optional[AzureResourceIdentity] = field(default=None, metadata={'description': 'Azure Active Directory identity configuration for a resource.'})  # fmt: skip
    key_id: Optional[str] = field(default=None, metadata={'description': 'A CMK URI of the key to use for encryption.'})  # fmt: skip
    server_kind: Optional[str] = field(default=None, metadata={'description': 'Kind of sql server. This is metadata used for the Azure portal experience.'})  # fmt: skip
    minimal_tls_version: Optional[str] = field(default=None, metadata={'description': 'Minimal TLS version. Allowed values: 1.0 , 1.1 , 1.2 '})  # fmt: skip
    primary_user_assigned_identity_id: Optional[str] = field(default=None, metadata={'description': 'The resource id of a user assigned identity to be used by default.'})  # fmt: skip
    public_network_access: Optional[str] = field(default=None, metadata={'description': 'Whether or not public endpoint access is allowed for this server. Value is optional but if passed in, must be Enabled or Disabled '})  # fmt: skip
    restrict_outbound_network_access: Optional[str] = field(default=None, metadata={'description': 'Whether or not to restrict outbound network access for this server. Value is optional but if passed in, must be Enabled or Disabled '})  # fmt: skip
    state: Optional[str] = field(default=None, metadata={"description": "The state of the server."})
    version: Optional[str] = field(default=None, metadata={"description": "The version of the server."})
    workspace_feature: Optional[str] = field(default=None, metadata={'description': 'Whether or not existing server has a workspace created and if it allows connection from workspace'})  # fmt: skip


def list_sql_servers(ctx: QueryContext) -> Iterator[AzureSqlServer]:
    """
    Lazily yields all sql servers of the subscription, page by page.
    The consumer decides when to stop: no further page is requested once it stops pulling.
    """
    for js in ctx.client.iterate(AzureSqlServer.api_spec, ctx):
        yield AzureSqlServer.parse(js)


def get_sql_server(ctx: QueryContext) -> Optional[AzureSqlServer]:
    name = ctx.equals_quals["name"]
    resource_group = ctx.equals_quals["resource_group"]
    js = ctx.client.get(AzureSqlServer.get_spec, ctx, resourceGroupName=resource_group, serverName=name)
    # Compatibility: the api sometimes answers a missing server with an empty response instead of a 404.
    if not js or not js.get("id"):
        log.debug(f"[Azure] Server {resource_group}/{name} returned without id. Treat as not found.")
        return None
    return AzureSqlServer.parse(js)


def sql_server_audit_policies(ctx: QueryContext, server: ResourceReference) -> List[AzureSqlServerBlobAuditingPolicy]:
    return AzureSqlServerBlobAuditingPolicy.list_by_server(ctx, server)


def sql_server_security_alert_policies(
    ctx: QueryContext, server: ResourceReference
) -> List[AzureSqlServerSecurityAlertPolicy]:
    return AzureSqlServerSecurityAlertPolicy.list_by_server(ctx, server)


def sql_server_ad_administrators(ctx: QueryContext, server: ResourceReference) -> List[AzureSqlServerADAdministrator]:
    return AzureSqlServerADAdministrator.list_by_server(ctx, server)


def sql_server_vulnerability_assessments(
    ctx: QueryContext, server: ResourceReference
) -> List[AzureSqlServerVulnerabilityAssessment]:
    return AzureSqlServerVulnerabilityAssessment.list_by_server(ctx, server)


def sql_server_firewall_rules(ctx: QueryContext, server: ResourceReference) -> List[AzureSqlServerFirewallRule]:
    return AzureSqlServerFirewallRule.list_by_server(ctx, server)


def sql_server_encryption_protectors(
    ctx: QueryContext, server: ResourceReference
) -> List[AzureSqlServerEncryptionProtector]:
    return AzureSqlServerEncryptionProtector.list_by_server(ctx, server)


def sql_server_private_endpoint_connections(
    ctx: QueryContext, server: ResourceReference
) -> List[AzureSqlServerPrivateEndpointConnection]:
    return AzureSqlServerPrivateEndpointConnection.list_by_server(ctx, server)


def sql_server_virtual_network_rules(
    ctx: QueryContext, server: ResourceReference
) -> List[AzureSqlServerVirtualNetworkRule]:
    return AzureSqlServerVirtualNetworkRule.list_by_server(ctx, server)


azure_sql_server = Table(
    name="azure_sql_server",
    description="Azure SQL Server",
    get_config=GetConfig(
        key_columns=["name", "resource_group"],
        hydrate=get_sql_server,
        ignore_error_codes=["ResourceNotFound", "ResourceGroupNotFound", "404", "InvalidApiVersionParameter"],
    ),
    list_config=ListConfig(hydrate=list_sql_servers),
    columns=azure_columns(
        [
            Column("name", ColumnType.string, "The friendly name that identifies the SQL server."),
            Column("id", ColumnType.string, "Contains ID to identify a SQL server uniquely."),
            Column("type", ColumnType.string, "The resource type of the SQL server."),
            Column("state", ColumnType.string, "The state of the server."),
            Column("kind", ColumnType.string, "The Kind of sql server.", S("server_kind")),
            Column("location", ColumnType.string, "The resource location."),
            Column("administrator_login", ColumnType.string, "Specifies the username of the administrator for this server."),  # fmt: skip  # noqa: E501
            Column("administrator_login_password", ColumnType.string, "The administrator login password."),
            Column("minimal_tls_version", ColumnType.string, "Minimal TLS version. Allowed values: '1.0', '1.1', '1.2'."),  # fmt: skip  # noqa: E501
            Column("public_network_access", ColumnType.string, "Whether or not public endpoint access is allowed for this server."),  # fmt: skip  # noqa: E501
            Column("restrict_outbound_network_access", ColumnType.string, "Whether or not to restrict outbound network access for this server."),  # fmt: skip  # noqa: E501
            Column("version", ColumnType.string, "The version of the server."),
            Column("fully_qualified_domain_name", ColumnType.string, "The fully qualified domain name of the server."),  # fmt: skip  # noqa: E501
            Column("identity", ColumnType.json, "The Azure Active Directory identity of the server.", S("server_identity")),  # fmt: skip  # noqa: E501
            Column("server_audit_policy", ColumnType.json, "Specifies the audit policy configuration for server.", hydrate=sql_server_audit_policies),  # fmt: skip  # noqa: E501
            Column("server_security_alert_policy", ColumnType.json, "Specifies the security alert policy configuration for server.", hydrate=sql_server_security_alert_policies),  # fmt: skip  # noqa: E501
            Column("server_azure_ad_administrator", ColumnType.json, "Specifies the active directory administrator.", hydrate=sql_server_ad_administrators),  # fmt: skip  # noqa: E501
            Column("server_vulnerability_assessment", ColumnType.json, "Specifies the server's vulnerability assessment.", hydrate=sql_server_vulnerability_assessments),  # fmt: skip  # noqa: E501
            Column("firewall_rules", ColumnType.json, "A list of firewall rules for this server.", hydrate=sql_server_firewall_rules),  # fmt: skip  # noqa: E501
            Column("encryption_protector", ColumnType.json, "The server encryption protector.", hydrate=sql_server_encryption_protectors),  # fmt: skip  # noqa: E501
            Column("private_endpoint_connections", ColumnType.json, "The private endpoint connections of the sql server.", hydrate=sql_server_private_endpoint_connections),  # fmt: skip  # noqa: E501
            Column("tags_src", ColumnType.json, "Specifies the set of tags attached to the server.", S("tags")),  # fmt: skip  # noqa: E501
            Column("virtual_network_rules", ColumnType.json, "A list of virtual network rules for this server.", hydrate=sql_server_virtual_network_rules),  # fmt: skip  # noqa: E501
        ]
    ),
)

tables: List[Table] = [azure_sql_server]
