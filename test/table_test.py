import threading
from typing import Any, Iterator, List

import pytest
from attr import evolve

from fix_table_azure.azure_client import QueryCancelledError
from fix_table_azure.resource.base import ResourceRef
from fix_table_azure.table import (
    Column,
    ColumnType,
    GetConfig,
    HydrateError,
    ListConfig,
    QueryContext,
    Table,
    as_json,
)
from fixlib.json_bender import S

Items = [
    ResourceRef("a", "/subscriptions/sub-1/resourceGroups/rg1/providers/x/a"),
    ResourceRef("b", "/subscriptions/sub-1/resourceGroups/rg2/providers/x/b"),
    ResourceRef("c", "/subscriptions/sub-1/resourceGroups/rg2/providers/x/c"),
]


def list_items(ctx: QueryContext) -> Iterator[ResourceRef]:
    ctx.check("list items")
    yield from Items


def failing(ctx: QueryContext, item: ResourceRef) -> Any:
    raise ValueError(f"can not enrich {item.name}")


def upper_name(ctx: QueryContext, item: ResourceRef) -> List[str]:
    return [item.name.upper()]


def items_table() -> Table:
    return Table(
        name="test_items",
        description="Items for testing",
        columns=[
            Column("name", ColumnType.string, "name"),
            Column("id", ColumnType.string, "id"),
            Column("upper", ColumnType.json, "enriched", hydrate=upper_name),
            Column("first_upper", ColumnType.string, "enriched and transformed", S(0), hydrate=upper_name),
            Column("broken", ColumnType.json, "always fails", hydrate=failing),
        ],
        list_config=ListConfig(hydrate=list_items),
        get_config=GetConfig(key_columns=["name", "id"], hydrate=lambda ctx: None),
    )


Tbl = items_table()


def test_column_values(ctx: QueryContext) -> None:
    rows = list(Tbl.rows(ctx, ["name", "upper", "first_upper"]))
    assert rows[0] == {"name": "a", "upper": ["A"], "first_upper": "A"}
    assert len(rows) == 3


def test_failing_column_fails_row(ctx: QueryContext) -> None:
    with pytest.raises(HydrateError) as ex:
        list(Tbl.rows(ctx, ["name", "broken"]))
    assert list(ex.value.errors) == ["broken"]
    assert ex.value.row_id == Items[0].id


def test_failing_column_tolerated(ctx: QueryContext) -> None:
    session = evolve(ctx.session, config=evolve(ctx.session.config, fail_row_on_column_error=False))
    lenient = QueryContext(session=session)
    rows = list(Tbl.rows(lenient, ["name", "broken", "upper"]))
    assert rows[1] == {"name": "b", "broken": None, "upper": ["B"]}


def test_row_without_executor(ctx: QueryContext) -> None:
    assert Tbl.row(ctx, Items[2], Tbl.select(["upper"])) == {"upper": ["C"]}
    with pytest.raises(HydrateError):
        Tbl.row(ctx, Items[2], Tbl.select(["broken"]))


def test_cancelled_enrichment_propagates(ctx: QueryContext) -> None:
    def cancelled(c: QueryContext, item: ResourceRef) -> Any:
        raise QueryCancelledError("cancelled")

    tbl = evolve(Tbl, columns=[Column("c", ColumnType.json, "cancelled", hydrate=cancelled)])
    session = evolve(ctx.session, config=evolve(ctx.session.config, fail_row_on_column_error=False))
    with pytest.raises(QueryCancelledError):
        list(tbl.rows(QueryContext(session=session)))


def test_limit_and_quals(ctx: QueryContext) -> None:
    limited = QueryContext(session=ctx.session, limit=2)
    assert [r["name"] for r in Tbl.rows(limited, ["name"])] == ["a", "b"]
    by_name = QueryContext(session=ctx.session, equals_quals={"name": "C"})
    assert [r["name"] for r in Tbl.rows(by_name, ["name"])] == ["c"]


def test_qualified_enriched_column_is_not_filtered(ctx: QueryContext) -> None:
    quals = QueryContext(session=ctx.session, equals_quals={"upper": ["X"]})
    assert len(list(Tbl.rows(quals, ["name"]))) == 3


def test_cancel_before_list(ctx: QueryContext) -> None:
    cancelled = QueryContext(session=ctx.session, cancelled=threading.Event())
    cancelled.cancel()
    with pytest.raises(QueryCancelledError):
        list(Tbl.rows(cancelled, ["name"]))


def test_unknown_column(ctx: QueryContext) -> None:
    with pytest.raises(KeyError):
        Tbl.select(["does_not_exist"])


def test_as_json() -> None:
    assert as_json(None) is None
    assert as_json("a") == "a"
    assert as_json([ResourceRef("a", "b")]) == [{"name": "a", "id": "b"}]


def test_lookup_not_supported(ctx: QueryContext) -> None:
    tbl = evolve(Tbl, get_config=None)
    with pytest.raises(ValueError):
        tbl.get_item(QueryContext(session=ctx.session, equals_quals={"name": "a", "id": Items[0].id}))
