"""
Fixtures y dobles de prueba para pytest.

_FakeContainer imita la parte de `azure.cosmos.ContainerProxy` que usa el
repositorio: read, query_items, delete_item, upsert_item y
client_connection.last_response_headers.
"""
from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Optional

import pytest
from azure.cosmos.exceptions import CosmosHttpResponseError
from loguru import logger

from upload_items.core.config import Settings
from upload_items.infrastructure.external.cosmos_sync.cosmos_repository import (
    PK_ALIAS,
    CosmosContainerRepository,
)
from upload_items.infrastructure.external.cosmos_sync.types import ConnectionRecord


class _FakeContainer:
    def __init__(
        self,
        partition_key_path: Optional[str] = "/clientId",
        *,
        read_fails: bool = False,
        query_fails: bool = False,
        fail_upsert_ids: Optional[set[str]] = None,
        fail_delete_ids: Optional[set[str]] = None,
        request_charge: str = "5.71",
    ) -> None:
        self.partition_key_path = partition_key_path
        self.read_fails = read_fails
        self.query_fails = query_fails
        self.fail_upsert_ids = fail_upsert_ids or set()
        self.fail_delete_ids = fail_delete_ids or set()
        self.request_charge = request_charge
        self.items: dict[tuple[str, Any], dict[str, Any]] = {}
        self.events: list[str] = []
        self.queries: list[str] = []
        self.client_connection = SimpleNamespace(last_response_headers={})

    # -- helpers -----------------------------------------------------------
    @property
    def _pk_field(self) -> str:
        return (self.partition_key_path or "").lstrip("/")

    def seed(self, document: dict[str, Any]) -> None:
        # Como Cosmos: el pk conserva su tipo JSON; sin el atributo queda indefinido (None).
        pk = document.get(self._pk_field) if self._pk_field else ""
        self.items[(document["id"], pk)] = dict(document)

    def documents(self) -> list[dict[str, Any]]:
        return sorted(self.items.values(), key=lambda d: d["id"])

    # -- ContainerProxy ----------------------------------------------------
    def read(self) -> dict[str, Any]:
        self.events.append("read")
        if self.read_fails:
            raise CosmosHttpResponseError(status_code=403, message="metadata forbidden")
        paths = [self.partition_key_path] if self.partition_key_path else []
        return {"id": "connections", "partitionKey": {"paths": paths, "kind": "Hash"}}

    def query_items(self, query: str, enable_cross_partition_query: bool = False):
        self.queries.append(query)
        if self.query_fails:
            raise CosmosHttpResponseError(status_code=500, message="query failed")
        snapshot = list(self.items.values())

        def _feed():
            for doc in snapshot:
                self.events.append("feed")
                yield {"id": doc["id"], PK_ALIAS: doc.get(self._pk_field)}
            self.events.append("feed_done")

        return _feed()

    def delete_item(self, item: str, partition_key: Any) -> None:
        self.events.append("delete")
        if item in self.fail_delete_ids:
            raise CosmosHttpResponseError(status_code=503, message="delete unavailable")
        if (item, partition_key) not in self.items:
            raise CosmosHttpResponseError(status_code=404, message="not found")
        del self.items[(item, partition_key)]

    def upsert_item(self, body: dict[str, Any]) -> dict[str, Any]:
        self.events.append("upsert")
        if body["id"] in self.fail_upsert_ids:
            raise CosmosHttpResponseError(status_code=503, message="service unavailable")
        self.seed(body)
        self.client_connection.last_response_headers = {"x-ms-request-charge": self.request_charge}
        return dict(body)


@pytest.fixture(autouse=True)
def _reset_loguru():
    """El CLI reconfigura loguru contra el stderr capturado del test; se limpia al salir."""
    yield
    logger.remove()


@pytest.fixture
def make_container():
    return _FakeContainer


@pytest.fixture
def make_repo():
    def _make(container: _FakeContainer) -> CosmosContainerRepository:
        return CosmosContainerRepository(container, database_name="db", container_name="connections")

    return _make


@pytest.fixture
def make_record():
    def _make(client_id: str = "CL001", record_id: str = "id-1", **extra: str) -> ConnectionRecord:
        return ConnectionRecord(
            id=record_id,
            client_id=client_id,
            client_name=extra.get("client_name", "Cliente"),
            servidor=extra.get("servidor", "sql01"),
            puerto=extra.get("puerto", "1433"),
            user=extra.get("user", "app"),
            password=extra.get("password", "secret"),
            repository=extra.get("repository", "repo"),
            adapter=extra.get("adapter", "SqlServerSP"),
        )

    return _make


@pytest.fixture
def make_settings(tmp_path):
    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "COSMOS_ENDPOINT": "https://account.documents.azure.com:443/",
            "COSMOS_KEY": "a2V5",
            "COSMOS_DATABASE": "db",
            "COSMOS_CONTAINER": "connections",
            "SQL_CONNECTION_STRING": "",
            "SNAPSHOT_PATH": str(tmp_path / "connections.json"),
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make
