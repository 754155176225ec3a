"""
Resolución del partition key del contenedor Cosmos.

- resolve_key_path: una vez por corrida, desde las propiedades del contenedor.
- resolve_key_value: por registro; función pura, sin errores.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from .types import ConnectionRecord


def declared_key_path(container_properties: Optional[Mapping[str, Any]]) -> str:
    """
    Extrae el path declarado (p.ej. '/clientId') de las propiedades que
    retorna `ContainerProxy.read()`. Retorna '' si no está disponible.
    """
    if not container_properties:
        return ""
    partition_key = container_properties.get("partitionKey") or {}
    paths = partition_key.get("paths") or []
    if not paths:
        return ""
    return str(paths[0] or "")


def resolve_key_path(container_properties: Optional[Mapping[str, Any]]) -> str:
    """Path sin el separador inicial: '/clientId' -> 'clientId'."""
    return declared_key_path(container_properties).lstrip("/")


def resolve_key_value(record: ConnectionRecord, key_path: str) -> str:
    """
    Valor de partition key para el registro (comparación sin mayúsculas):

    - 'clientId' -> record.client_id
    - 'id'       -> record.id
    - otro / ''  -> record.client_id (comportamiento por defecto)
    """
    path = (key_path or "").lstrip("/").lower()
    if path == "clientid":
        return record.client_id
    if path == "id":
        return record.id
    # Fallback a clientId si el path es desconocido
    return record.client_id


def document_key_value(document: Mapping[str, Any], key_path: str) -> Optional[Any]:
    """
    Valor que Cosmos usará como partition key para `document`.

    Cosmos lee el path declarado del propio documento y distingue
    mayúsculas; retorna None si el documento no tiene ese atributo.
    """
    current: Any = document
    for segment in [s for s in (key_path or "").split("/") if s]:
        if not isinstance(current, Mapping) or segment not in current:
            return None
        current = current[segment]
    return current
