"""
Repositorio Cosmos DB (azure-cosmos, SQL API) para:
- metadata del contenedor (partition key path)
- enumeración de (id, partition key) existentes
- DELETE por (id, partition key)
- UPSERT por identidad, retornando el costo en RU

No captura errores: el reconciliador y el publicador deciden el alcance
de cada fallo.
"""

from __future__ import annotations

import json
from typing import Any, Iterator, Optional

from azure.cosmos import ContainerProxy, CosmosClient

from .types import ItemDigest, PartitionKeyValue, as_text

# Alias del partition key en la proyección (evita choque con 'id' si el path es 'id').
PK_ALIAS = "__pk"

_REQUEST_CHARGE_HEADER = "x-ms-request-charge"


def build_digest_query(key_path: str) -> str:
    """
    SELECT c.id, c["<path>"] AS __pk FROM c

    Paths anidados ('a/b') se traducen a c["a"]["b"].
    """
    segments = [s for s in key_path.strip("/").split("/") if s]
    if not segments:
        raise ValueError("key_path vacío: no se puede proyectar el partition key")
    accessor = "c" + "".join(f"[{json.dumps(s)}]" for s in segments)
    return f"SELECT c.id, {accessor} AS {PK_ALIAS} FROM c"


class CosmosContainerRepository:
    def __init__(self, container: ContainerProxy, *, database_name: str = "", container_name: str = "") -> None:
        self._container = container
        self.database_name = database_name
        self.container_name = container_name

    @classmethod
    def connect(
        cls,
        *,
        endpoint: str,
        key: str,
        database_name: str,
        container_name: str,
    ) -> "CosmosContainerRepository":
        """
        Crea el cliente y el proxy del contenedor.

        El SDK valida la cuenta al construir CosmosClient, por eso se llama
        recién cuando hay registros para subir.
        """
        client = CosmosClient(endpoint, credential=key)
        container = client.get_database_client(database_name).get_container_client(container_name)
        return cls(container, database_name=database_name, container_name=container_name)

    def read_properties(self) -> dict[str, Any]:
        return self._container.read()

    def iter_digests(self, key_path: str) -> Iterator[ItemDigest]:
        """Recorre el feed completo proyectando solo id y partition key."""
        query = build_digest_query(key_path)
        for item in self._container.query_items(query=query, enable_cross_partition_query=True):
            yield ItemDigest(id=as_text(item.get("id")), partition_key=item.get(PK_ALIAS))

    def delete_item(self, item_id: str, partition_key: PartitionKeyValue) -> None:
        self._container.delete_item(item=item_id, partition_key=partition_key)

    def upsert_item(self, document: dict[str, Any]) -> float:
        """
        UPSERT: si existe un item con el mismo id y partition key se reemplaza
        completo; si no, se crea. El SDK toma el partition key del propio
        documento. Retorna el request charge (RU).
        """
        self._container.upsert_item(body=document)
        return self.last_request_charge()

    def last_request_charge(self) -> float:
        headers: Optional[dict[str, Any]] = getattr(
            getattr(self._container, "client_connection", None), "last_response_headers", None
        )
        if not headers:
            return 0.0
        try:
            return float(headers.get(_REQUEST_CHARGE_HEADER, 0.0))
        except (TypeError, ValueError):
            return 0.0
