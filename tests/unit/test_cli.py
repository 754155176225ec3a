"""
Tests del CLI. Cosmos DB se reemplaza por el contenedor falso de conftest.
"""
from __future__ import annotations

import json

import pytest

from upload_items import cli
from upload_items.infrastructure.external.cosmos_sync.sync_service import ConnectionsToCosmosSync


@pytest.fixture
def appsettings(tmp_path):
    def _write(**cosmos_overrides):
        cosmos = {
            "Endpoint": "https://acct.documents.azure.com:443/",
            "Key": "k",
            "DatabaseName": "Config",
            "ContainerName": "Connections",
        }
        cosmos.update(cosmos_overrides)
        path = tmp_path / "appsettings.json"
        path.write_text(json.dumps({"CosmosDb": cosmos}), encoding="utf-8")
        return str(path)

    return _write


def _argv(config: str, tmp_path, *extra: str) -> list[str]:
    return ["--config", config, "--env-file", str(tmp_path / "none.env"), *extra]


def test_empty_snapshot_prints_no_records_and_exits_zero(appsettings, tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.delenv("SQL_CONNECTION_STRING", raising=False)
    snapshot = tmp_path / "connections.json"
    snapshot.write_text("[]", encoding="utf-8")

    code = cli.main(_argv(appsettings(), tmp_path, "--snapshot", str(snapshot)))

    out = capsys.readouterr().out
    assert code == 0
    assert "No se encontraron conexiones" in out
    assert "Total: 0" in out


def test_missing_snapshot_is_fatal(appsettings, tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.delenv("SQL_CONNECTION_STRING", raising=False)

    code = cli.main(_argv(appsettings(), tmp_path, "--snapshot", str(tmp_path / "missing.json")))

    out = capsys.readouterr().out
    assert code == 1
    assert "Error:" in out
    assert "Success: 0" in out


def test_missing_cosmos_key_is_fatal(appsettings, tmp_path, capsys) -> None:
    code = cli.main(_argv(appsettings(Key=""), tmp_path))

    assert code == 1
    assert "COSMOS_KEY" in capsys.readouterr().out


def test_missing_config_file_is_fatal(tmp_path, capsys) -> None:
    code = cli.main(_argv(str(tmp_path / "nope.json"), tmp_path))

    assert code == 1
    assert "Error:" in capsys.readouterr().out


def test_parse_args_rejects_unknown_policy() -> None:
    with pytest.raises(SystemExit):
        cli.parse_args(["--source-policy", "maybe"])


def test_partial_failures_print_summary_and_exit_zero(
    appsettings, tmp_path, monkeypatch, capsys, make_container, make_repo, make_record
) -> None:
    container = make_container("/clientId", fail_upsert_ids={"id-2"})
    batch = [make_record(record_id=f"id-{i}", client_id=f"CL00{i}") for i in range(1, 4)]

    def fake_build(settings):
        return ConnectionsToCosmosSync(
            settings, repository_factory=lambda s: make_repo(container), loader=lambda s: batch
        )

    monkeypatch.setattr(cli, "build_from_settings", fake_build)

    code = cli.main(_argv(appsettings(), tmp_path))

    out = capsys.readouterr().out
    assert code == 0
    assert "=== Upload Complete ===" in out
    assert "Found: 3" in out
    assert "Success: 2" in out
    assert "Errors: 1" in out
    assert "Total: 3" in out
    assert sorted(d["id"] for d in container.documents()) == ["id-1", "id-3"]
