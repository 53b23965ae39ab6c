import logging
from typing import TypeVar, Any, List, Optional

from fixlib.json_bender import F

T = TypeVar("T")
log = logging.getLogger("fix.tables.azure")


def case_insensitive_eq(left: T, right: T) -> bool:
    if isinstance(left, str) and isinstance(right, str):
        return left.lower() == right.lower()
    else:
        return left == right


def lower(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


def id_to_akas(resource_id: Optional[str]) -> Optional[List[str]]:
    """
    Azure resource ids are case insensitive: the lower-cased id is the stable alias of a resource.
    """
    if not resource_id:
        return None
    return [resource_id.lower()]


ToLower = F(lower)
IdToAkas = F(id_to_akas)
NoneIfEmpty = F(lambda x: x if x else None)
