"""
Publicación del lote en Cosmos DB (UPSERT por registro).

Secuencial y determinista: cada intento termina (éxito o error) antes
de empezar el siguiente. Un fallo se loguea y cuenta, no detiene el loop.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Iterable

from azure.core.exceptions import AzureError
from loguru import logger

from .cosmos_repository import CosmosContainerRepository
from .partition_key import document_key_value, resolve_key_value
from .types import ConnectionRecord


@dataclass(frozen=True)
class PublishResult:
    success_count: int
    error_count: int
    request_charge: float = 0.0

    @property
    def total(self) -> int:
        return self.success_count + self.error_count


def _debug_document(document: dict[str, str]) -> str:
    masked = dict(document)
    if masked.get("password"):
        masked["password"] = "***"
    return json.dumps(masked, ensure_ascii=False)


def publish(
    repo: CosmosContainerRepository,
    batch: Iterable[ConnectionRecord],
    key_path: str,
) -> PublishResult:
    """
    Sube cada registro y retorna los contadores finales.

    Un registro cuyo partition key resulta vacío no se publica: se
    advierte y cuenta como error (success + errors == len(batch)).
    Lo mismo si el documento no lleva ese valor en el path del contenedor
    (p.ej. contenedor '/tenant'): Cosmos lo guardaría con partition key
    indefinido y la limpieza de la próxima corrida no lo vería.
    """
    success_count = 0
    error_count = 0
    total_charge = 0.0

    for record in batch:
        logger.info(f"Subiendo conexión {record.client_id} ({record.client_name})...")
        document = record.to_document()
        logger.debug(f"Documento: {_debug_document(document)}")

        pk_value = resolve_key_value(record, key_path)
        if not pk_value:
            logger.warning(f"✗ Se omite id='{record.id}': el partition key '/{key_path}' resulta vacío.")
            error_count += 1
            continue

        # El SDK toma el partition key del cuerpo: debe coincidir con el resuelto.
        if key_path and document_key_value(document, key_path) != pk_value:
            logger.error(
                f"✗ Partition key inválido para id='{record.id}': el documento no trae "
                f"'/{key_path}' = '{pk_value}'."
            )
            error_count += 1
            continue

        logger.info(f"Usando partition key path '/{key_path}' con valor '{pk_value}'")
        try:
            charge = repo.upsert_item(document)
        except (AzureError, ValueError, TypeError) as e:
            logger.error(f"✗ Error subiendo id='{record.id}': {e}")
            error_count += 1
            continue

        total_charge += charge
        success_count += 1
        logger.success(f"✓ OK (RU: {charge:.2f})")

    return PublishResult(success_count=success_count, error_count=error_count, request_charge=total_charge)
