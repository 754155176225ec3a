"""
Acceso tolerante a columnas de una fila SQL.

Una columna ausente o NULL se lee como cadena vacía; nunca levanta error.
"""

from __future__ import annotations

from typing import Any, Mapping

from .types import as_text


class SafeRowReader:
    """
    Envuelve el mapping de una fila (p.ej. `row._mapping` de SQLAlchemy).

    La búsqueda del nombre de columna no distingue mayúsculas, igual que
    GetOrdinal en los drivers de SQL Server.
    """

    def __init__(self, mapping: Mapping[str, Any]) -> None:
        self._values: dict[str, Any] = {}
        for key, value in mapping.items():
            # Si dos columnas colisionan al pasar a minúsculas, gana la primera.
            self._values.setdefault(str(key).lower(), value)

    def get_str(self, column: str) -> str:
        return as_text(self._values.get(column.lower()))
