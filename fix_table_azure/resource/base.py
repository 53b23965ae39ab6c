from __future__ import annotations

import logging
from datetime import datetime
from typing import ClassVar, Dict, Optional, Protocol, TypeVar, List, Type, Tuple

from attr import define, field, frozen

from fix_table_azure.azure_client import AzureResourceSpec
from fix_table_azure.table import Column, ColumnType
from fix_table_azure.utils import IdToAkas, ToLower
from fixlib.json import from_json
from fixlib.json_bender import Bender, Bend, Context, F, MapDict, S, bend
from fixlib.types import Json

log = logging.getLogger("fix.tables.azure")


class InvalidResourceIdError(ValueError):
    """Raised when the identity of a parent resource can not be derived from its resource id."""


def resource_group_from_id(resource_id: Optional[str]) -> str:
    """
    Extracts the resource group from a resource ID.

    The resource ID is expected to follow the Azure Resource Manager path format:
    /subscriptions/{subscriptionId}/resourceGroups/{resourceGroupName}/providers/...
    Splitting on "/" puts the resource group name at index 4.

    Raises InvalidResourceIdError if the id is missing, too short or the resource group segment is empty.
    """
    if not resource_id:
        raise InvalidResourceIdError("Can not derive resource group: resource id is missing")
    parts = resource_id.split("/")
    if len(parts) < 5 or not parts[4]:
        raise InvalidResourceIdError(f"Can not derive resource group from resource id: {resource_id}")
    return parts[4]


def extract_resource_group(resource_id: Optional[str]) -> Optional[str]:
    try:
        return resource_group_from_id(resource_id)
    except InvalidResourceIdError:
        return None


class ResourceReference(Protocol):
    """
    Anything that carries the name and the resource id of a parent resource.
    Parsed resources and plain references can be used interchangeably.
    """

    @property
    def name(self) -> Optional[str]: ...

    @property
    def id(self) -> Optional[str]: ...


@frozen
class ResourceRef:
    name: str
    id: str


def parent_identity(parent: ResourceReference) -> Tuple[str, str]:
    """
    :return: the tuple of resource group name and parent name.
    """
    if not parent.name:
        raise InvalidResourceIdError(f"Parent resource without name: {parent.id}")
    return resource_group_from_id(parent.id), parent.name


T = TypeVar("T")


class ResourceParseError(ValueError):
    """Raised when a payload of the api can not be turned into the expected resource."""


def parse_json_or_raise(json: Json, clazz: Type[T], mapping: Optional[Dict[str, Bender]] = None) -> T:
    """
    Parse json into a class.
    The raised error does not carry the source: payloads can contain secrets.
    """
    try:
        mapped = bend(mapping, json) if mapping is not None else json
        return from_json(mapped, clazz)
    except Exception as e:
        raise ResourceParseError(f"Failed to parse json into {clazz.__name__}: {e}") from e


def parse_json(json: Json, clazz: Type[T], mapping: Optional[Dict[str, Bender]] = None) -> Optional[T]:
    """
    Use this method to parse json into a class. If the json can not be parsed, the error is logged.
    :param json: the json to parse.
    :param clazz: the class to parse into.
    :param mapping: the optional mapping to apply before parsing.
    :return: The parsed object or None.
    """
    try:
        return parse_json_or_raise(json, clazz, mapping)
    except ResourceParseError as e:
        log.warning(str(e))
        return None


@define(eq=False, slots=False)
class MicrosoftResource:
    kind: ClassVar[str] = "microsoft_resource"
    # The mapping to transform the incoming API json into the internal representation.
    mapping: ClassVar[Dict[str, Bender]] = {}
    # Which API to call and what to expect in the result.
    api_spec: ClassVar[Optional[AzureResourceSpec]] = None
    # Azure common properties
    id: Optional[str] = field(default=None, metadata={'description': 'Fully qualified resource ID for the resource.'})  # fmt: skip
    name: Optional[str] = field(default=None, metadata={"description": "The name of the resource."})
    type: Optional[str] = field(default=None, metadata={"description": "The type of the resource."})
    tags: Optional[Dict[str, Optional[str]]] = field(factory=dict, metadata={"description": "Resource tags."})

    @property
    def resource_subscription_id(self) -> Optional[str]:
        return self.extract_part("subscriptions")

    @property
    def resource_group_name(self) -> str:
        return resource_group_from_id(self.id)

    def extract_part(self, part: str) -> Optional[str]:
        """
        Extracts a specific part from a resource ID.

        Example:
        For the resource ID "/subscriptions/{subscriptionId}/resourceGroups/{resourceGroupName}/...",
        calling extract_part("subscriptions") would return the value representing the subscription ID.
        """
        id_parts = (self.id or "").split("/")
        try:
            return id_parts[id_parts.index(part) + 1]
        except (ValueError, IndexError):
            return None

    @classmethod
    def from_api(cls: Type[MicrosoftResourceType], json: Json) -> Optional[MicrosoftResourceType]:
        return parse_json(json, cls, cls.mapping)

    @classmethod
    def parse(cls: Type[MicrosoftResourceType], json: Json) -> MicrosoftResourceType:
        return parse_json_or_raise(json, cls, cls.mapping)

    @classmethod
    def collect(cls: Type[MicrosoftResourceType], raw: List[Json]) -> List[MicrosoftResourceType]:
        """
        Parse all items. A single item that can not be parsed fails the whole collection.
        """
        return [cls.parse(js) for js in raw]


MicrosoftResourceType = TypeVar("MicrosoftResourceType", bound=MicrosoftResource)


@define(eq=False, slots=False)
class AzureSubscription(MicrosoftResource):
    kind: ClassVar[str] = "azure_subscription"
    api_spec: ClassVar[AzureResourceSpec] = AzureResourceSpec(
        service="resources",
        version="2022-12-01",
        path="/subscriptions",
        query_parameters=["api-version"],
        access_path="value",
        expect_array=True,
    )
    mapping: ClassVar[Dict[str, Bender]] = {
        "id": S("id"),
        "name": S("displayName"),
        "subscription_id": S("subscriptionId"),
        "tenant_id": S("tenantId"),
        "state": S("state"),
        "tags": S("tags", default={}),
    }
    subscription_id: Optional[str] = field(default=None, metadata={"description": "The subscription ID."})
    tenant_id: Optional[str] = field(default=None, metadata={"description": "The subscription tenant ID."})
    state: Optional[str] = field(default=None, metadata={'description': 'The subscription state. Possible values are Enabled, Warned, PastDue, Disabled, and Deleted.'})  # fmt: skip


@define(eq=False, slots=False)
class AzureSystemData:
    kind: ClassVar[str] = "azure_system_data"
    mapping: ClassVar[Dict[str, Bender]] = {
        "created_at": S("createdAt"),
        "created_by": S("createdBy"),
        "created_by_type": S("createdByType"),
        "last_modified_at": S("lastModifiedAt"),
        "last_modified_by": S("lastModifiedBy"),
        "last_modified_by_type": S("lastModifiedByType"),
    }
    created_at: Optional[datetime] = field(default=None, metadata={'description': 'The timestamp of resource creation (utc).'})  # fmt: skip
    created_by: Optional[str] = field(default=None, metadata={'description': 'The identity that created the resource.'})  # fmt: skip
    created_by_type: Optional[str] = field(default=None, metadata={'description': 'The type of identity that created the resource.'})  # fmt: skip
    last_modified_at: Optional[datetime] = field(default=None, metadata={'description': 'The timestamp of resource last modification (utc).'})  # fmt: skip
    last_modified_by: Optional[str] = field(default=None, metadata={'description': 'The identity that last modified the resource.'})  # fmt: skip
    last_modified_by_type: Optional[str] = field(default=None, metadata={'description': 'The type of identity that last modified the resource.'})  # fmt: skip


@define(eq=False, slots=False)
class AzureUserIdentity:
    kind: ClassVar[str] = "azure_user_identity"
    mapping: ClassVar[Dict[str, Bender]] = {"client_id": S("clientId"), "principal_id": S("principalId")}
    client_id: Optional[str] = field(default=None, metadata={'description': 'the client identifier of the Service Principal which this identity represents.'})  # fmt: skip
    principal_id: Optional[str] = field(default=None, metadata={'description': 'the object identifier of the Service Principal which this identity represents.'})  # fmt: skip


@define(eq=False, slots=False)
class AzureResourceIdentity:
    kind: ClassVar[str] = "azure_resource_identity"
    mapping: ClassVar[Dict[str, Bender]] = {
        "principal_id": S("principalId"),
        "tenant_id": S("tenantId"),
        "type": S("type"),
        "user_assigned_identities": S("userAssignedIdentities")
        >> MapDict(value_bender=Bend(AzureUserIdentity.mapping)),
    }
    principal_id: Optional[str] = field(default=None, metadata={'description': 'The Azure Active Directory principal id.'})  # fmt: skip
    tenant_id: Optional[str] = field(default=None, metadata={"description": "The Azure Active Directory tenant id."})
    type: Optional[str] = field(default=None, metadata={'description': 'The identity type. Set this to SystemAssigned in order to automatically create and assign an Azure Active Directory principal for the resource.'})  # fmt: skip
    user_assigned_identities: Optional[Dict[str, AzureUserIdentity]] = field(default=None, metadata={'description': 'The resource ids of the user assigned identities to use'})  # fmt: skip


@define(eq=False, slots=False)
class AzurePrivateLinkServiceConnectionState:
    kind: ClassVar[str] = "azure_private_link_service_connection_state"
    mapping: ClassVar[Dict[str, Bender]] = {
        "actions_required": S("actionsRequired"),
        "description": S("description"),
        "status": S("status"),
    }
    actions_required: Optional[str] = field(default=None, metadata={'description': 'A message indicating if changes on the service provider require any updates on the consumer.'})  # fmt: skip
    description: Optional[str] = field(default=None, metadata={'description': 'The reason for approval/rejection of the connection.'})  # fmt: skip
    status: Optional[str] = field(default=None, metadata={"description": "The private endpoint connection status."})


def azure_columns(columns: List[Column]) -> List[Column]:
    """
    Adds the columns every Azure table provides to the given table specific columns.
    """
    return columns + [
        Column("title", ColumnType.string, "Title of the resource.", S("name")),
        Column("tags", ColumnType.json, "A map of tags for the resource.", S("tags")),
        Column("akas", ColumnType.json, "Array of globally unique identifier strings (also known as) for the resource.", S("id") >> IdToAkas),  # fmt: skip  # noqa: E501
        Column("region", ColumnType.string, "The Azure region/location in which the resource is located.", S("location") >> ToLower),  # fmt: skip  # noqa: E501
        Column("resource_group", ColumnType.string, "The resource group which holds this resource.", S("id") >> F(extract_resource_group)),  # fmt: skip  # noqa: E501
        Column("cloud_environment", ColumnType.string, "The Azure Cloud Environment.", Context() >> S("cloud_environment")),  # fmt: skip  # noqa: E501
        Column("subscription_id", ColumnType.string, "The Azure Subscription ID in which the resource is located.", Context() >> S("subscription_id")),  # fmt: skip  # noqa: E501
    ]
