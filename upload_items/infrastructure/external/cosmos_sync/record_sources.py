"""
Carga del lote canónico y políticas ante fallo del origen SQL.

- strict (default): si SQL falla, la corrida aborta con cero registros.
- fallback: si SQL falla, se lee connections.json; solo aborta si tampoco existe.

Sin SQL configurado, el snapshot es el único origen (salvo SQL_REQUIRED).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Union

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from upload_items.core.config import Settings, SourceFailurePolicy
from upload_items.shared.exceptions import (
    ConfigurationError,
    SourceMissingError,
    SourceUnavailableError,
)

from .snapshot import read_snapshot, write_snapshot
from .sql_source import SqlConnectionSource
from .types import ConnectionDefaults, ConnectionRecord


class SnapshotSource:
    """Origen basado en el archivo snapshot."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def load(self) -> list[ConnectionRecord]:
        logger.info(f"Leyendo conexiones desde '{self.path}'...")
        return read_snapshot(self.path)


@dataclass(frozen=True)
class LoadedBatch:
    records: list[ConnectionRecord]
    origin: str  # "sql" | "snapshot"


class StrictLoadPolicy:
    """Fail-closed: un fallo de SQL no cae al snapshot."""

    name = SourceFailurePolicy.STRICT

    def load(self, sql: SqlConnectionSource, snapshot: SnapshotSource) -> LoadedBatch:
        try:
            return LoadedBatch(records=sql.load(), origin="sql")
        except SourceUnavailableError as e:
            logger.error(e.message)
            logger.error("No hay fallback a connections.json configurado; abortando.")
            raise


class FallbackLoadPolicy:
    """Permisiva: si SQL falla se usa el snapshot existente."""

    name = SourceFailurePolicy.FALLBACK

    def load(self, sql: SqlConnectionSource, snapshot: SnapshotSource) -> LoadedBatch:
        try:
            return LoadedBatch(records=sql.load(), origin="sql")
        except SourceUnavailableError as e:
            logger.warning(e.message)
            logger.warning(f"Usando fallback: {snapshot.path}")
        try:
            return LoadedBatch(records=snapshot.load(), origin="snapshot")
        except SourceMissingError as e:
            raise SourceUnavailableError(
                "SQL falló y no existe snapshot para el fallback",
                reason=e.message,
            ) from e


_POLICIES = {
    SourceFailurePolicy.STRICT: StrictLoadPolicy,
    SourceFailurePolicy.FALLBACK: FallbackLoadPolicy,
}


def build_load_policy(policy: Union[SourceFailurePolicy, str]):
    try:
        return _POLICIES[SourceFailurePolicy(policy)]()
    except ValueError as e:
        raise ConfigurationError(
            f"SOURCE_FAILURE_POLICY inválida: {policy!r} (usa 'strict' o 'fallback')",
            setting="SOURCE_FAILURE_POLICY",
        ) from e


def defaults_from_settings(settings: Settings) -> ConnectionDefaults:
    return ConnectionDefaults(
        client_name=settings.DEFAULT_CLIENT_NAME,
        puerto=settings.DEFAULT_PUERTO,
        adapter=settings.DEFAULT_ADAPTER,
    )


def load_batch(
    settings: Settings,
    *,
    engine_factory: Callable[[str], Engine] = create_engine,
    policy=None,
) -> list[ConnectionRecord]:
    """
    Retorna el lote canónico de la corrida.

    Tras una carga SQL con filas se regenera el snapshot (efecto lateral:
    si la escritura falla solo se advierte).
    """
    snapshot = SnapshotSource(settings.SNAPSHOT_PATH)

    if not settings.sql_configured:
        if settings.SQL_REQUIRED:
            raise ConfigurationError(
                "SQL_CONNECTION_STRING no está configurado y SQL_REQUIRED=true; no se permite fallback a connections.json.",
                setting="SQL_CONNECTION_STRING",
            )
        return snapshot.load()

    sql = SqlConnectionSource(
        settings.SQL_CONNECTION_STRING,
        query=settings.SQL_QUERY,
        defaults=defaults_from_settings(settings),
        odbc_driver=settings.SQL_ODBC_DRIVER,
        engine_factory=engine_factory,
    )
    load_policy = policy or build_load_policy(settings.SOURCE_FAILURE_POLICY)
    batch = load_policy.load(sql, snapshot)

    if batch.origin == "sql" and batch.records:
        try:
            written = write_snapshot(snapshot.path, batch.records)
            logger.info(f"Generado '{snapshot.path}' desde la consulta SQL (filas: {written}).")
        except OSError as e:
            logger.warning(f"No se pudo escribir '{snapshot.path}': {e}")

    return batch.records
