"""
Tipos y utilidades puras para la carga de conexiones a Cosmos DB.

Se mantienen libres de I/O para poder testearlos fácilmente.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Mapping, Union

PartitionKeyValue = Union[str, int, float, bool, None]

# Orden canónico de campos en el documento Cosmos y en connections.json.
DOCUMENT_FIELDS: tuple[str, ...] = (
    "id",
    "clientId",
    "clientName",
    "servidor",
    "puerto",
    "user",
    "password",
    "repository",
    "adapter",
)


def new_record_id() -> str:
    """Genera un id nuevo (UUID4 en texto)."""
    return str(uuid.uuid4())


def as_text(value: Any) -> str:
    """None -> '', cualquier otro valor -> str(value)."""
    if value is None:
        return ""
    return str(value)


@dataclass(frozen=True)
class ConnectionDefaults:
    """
    Valores compartidos (sección ConnectionsDefaults) que se mezclan
    en cada registro al momento de cargarlo.

    Regla de precedencia: el valor de la fila gana si no está vacío;
    si está vacío se usa el default.
    """

    client_name: str = ""
    puerto: str = ""
    adapter: str = ""

    def merge(self, *, client_name: str = "", puerto: str = "", adapter: str = "") -> dict[str, str]:
        return {
            "clientName": client_name or self.client_name,
            "puerto": puerto or self.puerto,
            "adapter": adapter or self.adapter,
        }


@dataclass(frozen=True)
class ConnectionRecord:
    """Registro canónico: una conexión de cliente, independiente del origen."""

    id: str
    client_id: str
    client_name: str = ""
    servidor: str = ""
    puerto: str = ""
    user: str = ""
    password: str = ""
    repository: str = ""
    adapter: str = ""

    def to_document(self) -> dict[str, str]:
        """Documento listo para Cosmos / snapshot (camelCase, orden fijo)."""
        return {
            "id": self.id,
            "clientId": self.client_id,
            "clientName": self.client_name,
            "servidor": self.servidor,
            "puerto": self.puerto,
            "user": self.user,
            "password": self.password,
            "repository": self.repository,
            "adapter": self.adapter,
        }

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "ConnectionRecord":
        """
        Construye un registro desde un dict (p.ej. una entrada del snapshot).

        - Los nombres de campo se comparan sin distinguir mayúsculas.
        - Si falta el id (o viene vacío) se genera uno nuevo.
        """
        lowered = {str(k).lower(): v for k, v in document.items()}

        def field(name: str) -> str:
            return as_text(lowered.get(name.lower()))

        return cls(
            id=field("id") or new_record_id(),
            client_id=field("clientId"),
            client_name=field("clientName"),
            servidor=field("servidor"),
            puerto=field("puerto"),
            user=field("user"),
            password=field("password"),
            repository=field("repository"),
            adapter=field("adapter"),
        )


@dataclass(frozen=True)
class ItemDigest:
    """
    Par (id, partition key) de un item existente en el contenedor.

    El partition key conserva el tipo JSON con que está guardado
    (str, número o bool): el DELETE debe usar exactamente ese valor.
    """

    id: str
    partition_key: PartitionKeyValue

    @property
    def has_partition_key(self) -> bool:
        return self.partition_key is not None and self.partition_key != ""
