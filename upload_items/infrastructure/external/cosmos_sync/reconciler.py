"""
Limpieza del contenedor destino.

- drain: borra todos los items existentes antes de subir el lote.
- prune: después de subir, borra los items cuyo (id, pk) no está en el lote.

Ambos son best-effort: nunca levantan errores que aborten la corrida.
La enumeración se completa (en memoria) antes de borrar nada, para no
mutar el contenedor mientras el feed sigue abierto.
"""

from __future__ import annotations

from typing import AbstractSet, Optional

from azure.core.exceptions import AzureError
from loguru import logger

from .cosmos_repository import CosmosContainerRepository
from .types import ItemDigest, PartitionKeyValue


def collect_digests(repo: CosmosContainerRepository, key_path: str) -> Optional[list[ItemDigest]]:
    """
    Enumera (id, pk) de todo el contenedor.

    Retorna None si la enumeración falla (el caller no borra nada).
    Descarta digests sin id y los que tienen partition key vacío.
    """
    digests: list[ItemDigest] = []
    try:
        for digest in repo.iter_digests(key_path):
            if not digest.id:
                continue
            if not digest.has_partition_key:
                logger.warning(f"Se omite borrar id='{digest.id}': el partition key está vacío.")
                continue
            digests.append(digest)
    except (AzureError, ValueError) as e:
        logger.error(f"Error enumerando items existentes: {e}")
        return None
    return digests


def _delete_all(repo: CosmosContainerRepository, digests: list[ItemDigest]) -> int:
    deleted = 0
    for digest in digests:
        try:
            logger.info(f"Borrando item id='{digest.id}', pk='{digest.partition_key}'...")
            repo.delete_item(digest.id, digest.partition_key)
            deleted += 1
        except AzureError as e:
            logger.warning(f"No se pudo borrar id='{digest.id}', pk='{digest.partition_key}': {e}")
    return deleted


def drain(repo: CosmosContainerRepository, key_path: str) -> int:
    """Borra todos los items. Sin key_path conocido no hace nada."""
    logger.info("Limpiando items existentes del contenedor antes de la carga...")
    if not key_path:
        logger.info("El contenedor no tiene partition key path conocido; se omite el borrado.")
        return 0

    digests = collect_digests(repo, key_path)
    if digests is None:
        return 0

    deleted = _delete_all(repo, digests)
    logger.info(f"Borrados {deleted} items existentes del contenedor.")
    return deleted


def prune(repo: CosmosContainerRepository, key_path: str, keep: AbstractSet[tuple[str, PartitionKeyValue]]) -> int:
    """
    Borra los items cuyo par (id, partition key) no está en `keep`.

    Se compara el par completo: un registro que conserva su id pero cambió
    de partition key deja en el contenedor un item viejo con el mismo id.
    """
    logger.info("Eliminando items que ya no están en el lote...")
    if not key_path:
        logger.info("El contenedor no tiene partition key path conocido; se omite el borrado.")
        return 0

    digests = collect_digests(repo, key_path)
    if digests is None:
        return 0

    stale = [d for d in digests if (d.id, d.partition_key) not in keep]
    deleted = _delete_all(repo, stale)
    logger.info(f"Borrados {deleted} items obsoletos del contenedor.")
    return deleted
