"""
Servicio de carga conexiones -> Cosmos DB.

Diseño (resumen):
- Valida configuración del destino (antes de cualquier I/O)
- Carga el lote canónico (SQL o snapshot, según política)
- Lee el partition key path del contenedor (una vez)
- drain -> publish   (modo por defecto)
  publish -> prune   (modo prune: achica la ventana sin datos)
- Reporte final

Consistencia:
- En modo drain, si la corrida se interrumpe entre el borrado y el final
  del upload, el contenedor queda parcialmente poblado. No hay transacción
  ni checkpoint: se vuelve a ejecutar la herramienta.
"""

from __future__ import annotations

from typing import Callable

from azure.core.exceptions import AzureError
from loguru import logger

from upload_items.core.config import ReconcileMode, Settings

from .cosmos_repository import CosmosContainerRepository
from .partition_key import declared_key_path, resolve_key_path, resolve_key_value
from .publisher import publish
from .reconciler import drain, prune
from .record_sources import load_batch
from .report import RunReport
from .types import ConnectionRecord

RepositoryFactory = Callable[[Settings], CosmosContainerRepository]
BatchLoader = Callable[[Settings], list[ConnectionRecord]]


def connect_repository(settings: Settings) -> CosmosContainerRepository:
    return CosmosContainerRepository.connect(
        endpoint=settings.COSMOS_ENDPOINT,
        key=settings.COSMOS_KEY,
        database_name=settings.COSMOS_DATABASE,
        container_name=settings.COSMOS_CONTAINER,
    )


class ConnectionsToCosmosSync:
    """
    Orquestador de una corrida completa.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        repository_factory: RepositoryFactory = connect_repository,
        loader: BatchLoader = load_batch,
    ) -> None:
        self._settings = settings
        self._repository_factory = repository_factory
        self._loader = loader

    def run_once(self) -> RunReport:
        """
        Ejecuta la corrida. ConfigurationError / SourceUnavailableError /
        SourceMissingError se propagan al caller; los errores del destino no.
        """
        settings = self._settings
        settings.validate_destination()

        records = self._loader(settings)
        if not records:
            logger.info("No se encontraron conexiones para subir.")
            return RunReport.no_records()

        logger.info(f"Se encontraron {len(records)} conexiones para subir.")

        try:
            repo = self._repository_factory(settings)
        except (AzureError, ValueError) as e:
            logger.error(f"No se pudo conectar a Cosmos DB: {e}")
            return RunReport(
                status="completed",
                found=len(records),
                errors=len(records),
                message=f"No se pudo conectar a Cosmos DB: {e}",
            )

        key_path = self._read_key_path(repo)

        if settings.RECONCILE_MODE == ReconcileMode.PRUNE:
            result = publish(repo, records, key_path)
            keep = {(r.id, resolve_key_value(r, key_path)) for r in records}
            deleted = prune(repo, key_path, keep)
        else:
            deleted = drain(repo, key_path)
            result = publish(repo, records, key_path)

        logger.info(
            f"Carga completada. ok={result.success_count}, errores={result.error_count}, "
            f"borrados={deleted}, RU={result.request_charge:.2f}"
        )
        return RunReport(
            status="completed",
            found=len(records),
            success=result.success_count,
            errors=result.error_count,
            deleted=deleted,
            request_charge=result.request_charge,
        )

    def _read_key_path(self, repo: CosmosContainerRepository) -> str:
        target = f"{self._settings.COSMOS_DATABASE}/{self._settings.COSMOS_CONTAINER}"
        try:
            properties = repo.read_properties()
        except AzureError as e:
            logger.warning(f"Conectado a Cosmos DB: {target} (no se pudo leer la metadata del contenedor: {e})")
            return ""
        logger.info(f"Conectado a Cosmos DB: {target} (PartitionKeyPath: {declared_key_path(properties)})")
        return resolve_key_path(properties)


def build_from_settings(settings: Settings) -> ConnectionsToCosmosSync:
    """Constructor “oficial” del servicio."""
    return ConnectionsToCosmosSync(settings)
