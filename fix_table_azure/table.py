from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from enum import Enum
from itertools import islice
from typing import Any, Callable, ClassVar, Dict, Iterable, Iterator, List, Optional, Sequence

from attr import define, field
from azure.core.exceptions import HttpResponseError

from fix_table_azure.azure_client import CallContext, MicrosoftClient, QueryCancelledError, is_not_found_error
from fix_table_azure.session import AzureSession
from fix_table_azure.utils import case_insensitive_eq
from fixlib.json import to_json
from fixlib.json_bender import Bender, S, bend
from fixlib.types import Json, JsonElement

log = logging.getLogger("fix.tables.azure")


class ColumnType(Enum):
    string = "string"
    json = "json"
    boolean = "boolean"
    integer = "integer"
    double = "double"
    timestamp = "timestamp"


@define(eq=False, kw_only=True)
class QueryContext(CallContext):
    session: AzureSession
    # equality qualifiers of the query: column name -> value
    equals_quals: Dict[str, Any] = field(factory=dict)
    # maximum number of rows the consumer wants
    limit: Optional[int] = None

    @property
    def client(self) -> MicrosoftClient:
        return self.session.client

    def bend_context(self) -> Dict[str, Any]:
        return {
            "subscription_id": self.session.subscription_id,
            "cloud_environment": self.session.cloud_environment,
        }


ListFn = Callable[[QueryContext], Iterable[Any]]
GetFn = Callable[[QueryContext], Optional[Any]]
HydrateFn = Callable[[QueryContext, Any], Any]


class HydrateError(Exception):
    def __init__(self, table: str, row_id: Optional[str], errors: Dict[str, Exception]) -> None:
        self.table = table
        self.row_id = row_id
        self.errors = errors
        details = ", ".join(f"{name}: {e}" for name, e in errors.items())
        super().__init__(f"{table}: failed to compute columns of row {row_id}: {details}")


def as_json(value: Any) -> JsonElement:
    if value is None or isinstance(value, (str, int, float, bool, dict)):
        return value
    elif isinstance(value, (list, tuple)):
        return [as_json(v) for v in value]
    else:
        return to_json(value, strip_nulls=True)


@define(eq=False)
class Column:
    name: str
    type: ColumnType
    description: str
    # extraction path, applied to the json of the item or to the result of the hydrate function
    transform: Optional[Bender] = None
    # computes the value from the already fetched item, usually with an additional api call
    hydrate: Optional[HydrateFn] = None

    def extract(self, source: JsonElement, context: Dict[str, Any]) -> Any:
        if self.transform is not None:
            return bend(self.transform, source, context)
        elif self.hydrate is not None:
            return source
        else:
            return bend(S(self.name), source, context)


@define(eq=False)
class ListConfig:
    hydrate: ListFn


@define(eq=False)
class GetConfig:
    key_columns: List[str]
    hydrate: GetFn
    # errors with one of these codes are treated as "resource does not exist"
    ignore_error_codes: List[str] = field(factory=list)

    def matches(self, quals: Dict[str, Any]) -> bool:
        return all(quals.get(name) for name in self.key_columns)

    def should_ignore(self, e: Exception) -> bool:
        return is_not_found_error(e, self.ignore_error_codes)


@define(eq=False)
class Table:
    # identifies a row in error messages
    id_column: ClassVar[str] = "id"

    name: str
    description: str
    columns: List[Column]
    list_config: ListConfig
    get_config: Optional[GetConfig] = None

    def column(self, name: str) -> Column:
        for col in self.columns:
            if col.name == name:
                return col
        raise KeyError(f"Table {self.name} has no column {name}")

    def select(self, names: Optional[Sequence[str]] = None) -> List[Column]:
        return self.columns if not names else [self.column(name) for name in names]

    def rows(self, ctx: QueryContext, columns: Optional[Sequence[str]] = None) -> Iterator[Json]:
        """
        Stream the rows of this table.
        Only the selected columns are computed; enriched columns of one row are computed concurrently.
        """
        selected = self.select(columns)
        sid = ctx.session.subscription_id
        log.info(f"[Azure:{sid}] Query {self.name} quals={ctx.equals_quals} limit={ctx.limit}")
        pool_size = ctx.session.config.hydrate_pool_size
        with ThreadPoolExecutor(max_workers=pool_size, thread_name_prefix=f"hydrate_{self.name}") as executor:
            for item in self.items(ctx):
                yield self.row(ctx, item, selected, executor)

    def items(self, ctx: QueryContext) -> Iterator[Any]:
        if self.get_config is not None and self.get_config.matches(ctx.equals_quals):
            item = self.get_item(ctx)
            return iter([] if item is None or not self.matches_quals(ctx, item) else [item])

        listed = (item for item in self.list_config.hydrate(ctx) if self.matches_quals(ctx, item))
        return islice(listed, ctx.limit) if ctx.limit is not None else listed

    def get_item(self, ctx: QueryContext) -> Optional[Any]:
        if self.get_config is None:
            raise ValueError(f"Table {self.name} does not support lookups")
        try:
            return self.get_config.hydrate(ctx)
        except HttpResponseError as e:
            if self.get_config.should_ignore(e):
                log.debug(f"[Azure] {self.name}: lookup {ctx.equals_quals} found nothing: {e}")
                return None
            raise

    def matches_quals(self, ctx: QueryContext, item: Any) -> bool:
        if not ctx.equals_quals:
            return True
        source = as_json(item)
        context = ctx.bend_context()
        for name, expected in ctx.equals_quals.items():
            col = self.column(name)
            # enriched columns would need an api call per row: the host filters them
            if col.hydrate is None and not case_insensitive_eq(col.extract(source, context), expected):
                return False
        return True

    def row(
        self,
        ctx: QueryContext,
        item: Any,
        columns: Optional[Sequence[Column]] = None,
        executor: Optional[Executor] = None,
    ) -> Json:
        selected = columns if columns is not None else self.columns
        source = as_json(item)
        context = ctx.bend_context()

        def compute(col: Column) -> Any:
            assert col.hydrate is not None
            return col.extract(as_json(col.hydrate(ctx, item)), context)

        result: Json = {}
        errors: Dict[str, Exception] = {}
        futures: Dict[str, Future[Any]] = {}
        for col in selected:
            if col.hydrate is None:
                result[col.name] = col.extract(source, context)
            elif executor is not None:
                futures[col.name] = executor.submit(compute, col)
            else:
                try:
                    result[col.name] = compute(col)
                except Exception as e:
                    errors[col.name] = e
        for name, future in futures.items():
            try:
                result[name] = future.result()
            except Exception as e:
                errors[name] = e

        if errors:
            row_id = source.get(self.id_column) if isinstance(source, dict) else None
            for e in errors.values():
                if isinstance(e, QueryCancelledError):
                    raise e
            if ctx.session.config.fail_row_on_column_error:
                raise HydrateError(self.name, row_id, errors)
            for name, e in errors.items():
                log.warning(f"[Azure] {self.name}: can not compute column {name} of {row_id}: {e}")
                result[name] = None

        return {col.name: result.get(col.name) for col in selected}
