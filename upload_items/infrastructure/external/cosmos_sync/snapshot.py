"""
Snapshot JSON de conexiones (connections.json).

Es a la vez un origen alternativo y un artefacto de auditoría que se
regenera después de cada carga SQL exitosa.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Union

from loguru import logger

from upload_items.shared.exceptions import SourceMissingError, SourceUnavailableError

from .types import ConnectionRecord


def read_snapshot(path: Union[str, Path]) -> list[ConnectionRecord]:
    """
    Lee el snapshot.

    - Archivo inexistente -> SourceMissingError.
    - Archivo vacío, `null` o sin array -> lote vacío.
    - Entradas que no son objetos se ignoran con warning.
    """
    snapshot_path = Path(path)
    if not snapshot_path.exists():
        raise SourceMissingError(str(snapshot_path))

    text = snapshot_path.read_text(encoding="utf-8-sig").strip()
    if not text:
        return []

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise SourceUnavailableError(f"'{snapshot_path}' no es JSON válido", reason=str(e)) from e
    if not isinstance(payload, list):
        logger.warning(f"'{snapshot_path}' no contiene un array de conexiones; se considera vacío.")
        return []

    records: list[ConnectionRecord] = []
    for position, entry in enumerate(payload):
        if not isinstance(entry, dict):
            logger.warning(f"Entrada #{position} de '{snapshot_path}' no es un objeto; se ignora.")
            continue
        records.append(ConnectionRecord.from_document(entry))
    return records


def write_snapshot(path: Union[str, Path], records: Iterable[ConnectionRecord]) -> int:
    """Escribe el snapshot con indentación. Retorna cuántos registros escribió."""
    documents = [record.to_document() for record in records]
    snapshot_path = Path(path)
    if snapshot_path.parent and not snapshot_path.parent.exists():
        snapshot_path.parent.mkdir(parents=True, exist_ok=True)
    snapshot_path.write_text(json.dumps(documents, indent=2, ensure_ascii=False), encoding="utf-8")
    return len(documents)
