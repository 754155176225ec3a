from __future__ import annotations

import pytest

from upload_items.infrastructure.external.cosmos_sync.partition_key import (
    declared_key_path,
    document_key_value,
    resolve_key_path,
    resolve_key_value,
)


def _props(*paths: str) -> dict:
    return {"id": "connections", "partitionKey": {"paths": list(paths), "kind": "Hash"}}


def test_resolve_key_path_strips_leading_separator() -> None:
    assert resolve_key_path(_props("/clientId")) == "clientId"
    assert declared_key_path(_props("/clientId")) == "/clientId"


@pytest.mark.parametrize("properties", [None, {}, {"partitionKey": {}}, _props()])
def test_resolve_key_path_is_empty_without_metadata(properties) -> None:
    assert resolve_key_path(properties) == ""


def test_client_id_path_returns_client_id(make_record) -> None:
    record = make_record(client_id="CL001", record_id="9b1c")
    assert resolve_key_value(record, "clientId") == "CL001"


@pytest.mark.parametrize("path", ["id", "ID", "/id"])
def test_id_path_returns_record_id(make_record, path) -> None:
    record = make_record(client_id="CL001", record_id="9b1c")
    assert resolve_key_value(record, path) == "9b1c"


@pytest.mark.parametrize("path", ["CLIENTID", "clientid", "/clientId"])
def test_client_id_comparison_ignores_case(make_record, path) -> None:
    assert resolve_key_value(make_record(client_id="CL002"), path) == "CL002"


@pytest.mark.parametrize("path", ["", "tenantId", "region/zone"])
def test_unknown_or_empty_path_falls_back_to_client_id(make_record, path) -> None:
    record = make_record(client_id="CL003", record_id="abc")
    assert resolve_key_value(record, path) == "CL003"


def test_document_key_value_reads_declared_path() -> None:
    document = {"id": "id-1", "clientId": "CL001", "meta": {"tenant": 5}}

    assert document_key_value(document, "clientId") == "CL001"
    assert document_key_value(document, "/meta/tenant") == 5


@pytest.mark.parametrize("path", ["tenant", "clientid", "meta/tenant"])
def test_document_key_value_is_none_when_attribute_is_missing(path) -> None:
    assert document_key_value({"id": "id-1", "clientId": "CL001", "meta": "x"}, path) is None
