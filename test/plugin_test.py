import json
import threading

import pytest

from conftest import StaticFileMicrosoftClient, http_error
from fix_table_azure import AzureTablePlugin
from fix_table_azure.__main__ import main
from fix_table_azure.azure_client import QueryCancelledError
from fix_table_azure.config import AzureAccountConfig, AzureConfig


def test_tables() -> None:
    tables = AzureTablePlugin.tables()
    assert list(tables) == ["azure_sql_server"]
    with pytest.raises(KeyError):
        AzureTablePlugin().table("azure_unknown")


def test_sessions(azure_client: StaticFileMicrosoftClient) -> None:
    sessions = AzureTablePlugin(AzureConfig()).sessions()
    assert [s.subscription_id for s in sessions] == ["sub-1", "sub-2"]
    assert all(s.account == "default" for s in sessions)

    only = AzureTablePlugin(AzureConfig()).sessions("sub-2")
    assert [s.subscription_id for s in only] == ["sub-2"]

    excluded = AzureConfig(accounts={"a": AzureAccountConfig(exclude_subscriptions=["sub-1"])})
    assert [s.subscription_id for s in AzureTablePlugin(excluded).sessions()] == ["sub-2"]

    named = AzureConfig(accounts={"a": AzureAccountConfig(subscriptions=["sub-9"])})
    assert [s.subscription_id for s in AzureTablePlugin(named).sessions()] == ["sub-9"]


def test_query(azure_client: StaticFileMicrosoftClient) -> None:
    plugin = AzureTablePlugin(AzureConfig())
    rows = list(plugin.query("azure_sql_server", columns=["name", "subscription_id"]))
    assert [(r["name"], r["subscription_id"]) for r in rows] == [
        ("sqlcrudtest-1", "sub-1"),
        ("sqlcrudtest-2", "sub-1"),
        ("sqlcrudtest-1", "sub-2"),
        ("sqlcrudtest-2", "sub-2"),
    ]
    # the limit counts across subscriptions
    assert len(list(plugin.query("azure_sql_server", columns=["name"], limit=3))) == 3
    assert len(list(plugin.query("azure_sql_server", columns=["name"], limit=1))) == 1
    # point lookup
    rows = list(
        plugin.query(
            "azure_sql_server",
            subscription="sub-1",
            equals_quals={"name": "sqlcrudtest-1", "resource_group": "rg1"},
            columns=["id", "resource_group"],
        )
    )
    assert rows == [
        {
            "id": "/subscriptions/sub-1/resourceGroups/rg1/providers/Microsoft.Sql/servers/sqlcrudtest-1",
            "resource_group": "rg1",
        }
    ]


def test_query_cancelled(azure_client: StaticFileMicrosoftClient) -> None:
    cancelled = threading.Event()
    cancelled.set()
    with pytest.raises(QueryCancelledError):
        list(AzureTablePlugin().query("azure_sql_server", columns=["name"], cancelled=cancelled))


def test_main(azure_client: StaticFileMicrosoftClient, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--subscription", "sub-1", "--columns", "name", "region", "--limit", "2"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert [json.loads(line) for line in lines] == [
        {"name": "sqlcrudtest-1", "region": "japaneast"},
        {"name": "sqlcrudtest-2", "region": "westeurope"},
    ]
    assert main(["--table", "azure_unknown"]) == 1


def test_main_query_errors(
    azure_client: StaticFileMicrosoftClient, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    # deadline already passed
    assert main(["--timeout", "0"]) == 1

    def forbidden(*args: object, **kwargs: object) -> None:
        raise http_error(403, "AuthorizationFailed")

    monkeypatch.setattr(StaticFileMicrosoftClient, "iterate", forbidden)
    assert main(["--subscription", "sub-1"]) == 1
    assert capsys.readouterr().out == ""
