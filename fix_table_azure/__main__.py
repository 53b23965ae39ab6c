import json
import logging
import sys
from typing import Any, Dict, List, Optional

from azure.core.exceptions import AzureError

from fix_table_azure import AzureTablePlugin
from fix_table_azure.config import AzureConfig, load_config
from fix_table_azure.table import HydrateError
from fixlib.args import ArgumentParser, Namespace
from fixlib.logger import setup_logger, add_args as logging_add_args

log = logging.getLogger("fix.tables.azure")


def add_args(arg_parser: ArgumentParser) -> None:
    arg_parser.add_argument("--config", help="Path to the yaml configuration file", dest="config", default=None)
    arg_parser.add_argument("--table", help="Table to query", dest="table", default="azure_sql_server")
    arg_parser.add_argument("--subscription", help="Only query this subscription", dest="subscription", default=None)
    arg_parser.add_argument("--name", help="Name of the resource to look up", dest="name", default=None)
    arg_parser.add_argument(
        "--resource-group", help="Resource group of the resource to look up", dest="resource_group", default=None
    )
    arg_parser.add_argument("--limit", help="Maximum number of rows", dest="limit", type=int, default=None)
    arg_parser.add_argument(
        "--columns", help="Only compute these columns", dest="columns", nargs="+", default=None, type=str
    )
    arg_parser.add_argument("--timeout", help="Timeout of the query in seconds", dest="timeout", type=float)
    arg_parser.add_argument(
        "--json-log", help="Log in json format", dest="json_log", action="store_true", default=False
    )


def parse_args(argv: Optional[List[str]] = None) -> Namespace:
    arg_parser = ArgumentParser(
        description="Fix Inventory Azure tables: query Azure resources as rows.",
        env_args_prefix="FIX_TABLE_AZURE_",
    )
    add_args(arg_parser)
    logging_add_args(arg_parser)
    return arg_parser.parse_args(argv)  # type: ignore


def equals_quals(args: Namespace) -> Dict[str, Any]:
    quals: Dict[str, Any] = {}
    if args.name:
        quals["name"] = args.name
    if args.resource_group:
        quals["resource_group"] = args.resource_group
    return quals


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logger("fix-table-azure", verbose=args.verbose, quiet=args.quiet, json_format=args.json_log)
    config = load_config(args.config) if args.config else AzureConfig()
    plugin = AzureTablePlugin(config)
    try:
        for row in plugin.query(
            args.table,
            subscription=args.subscription,
            equals_quals=equals_quals(args),
            limit=args.limit,
            columns=args.columns,
            timeout=args.timeout,
        ):
            sys.stdout.write(json.dumps(row, default=str) + "\n")
    except (KeyError, ValueError, HydrateError, AzureError) as e:
        log.error(f"Query {args.table} failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
