"""
Reporte final de la corrida (se imprime por stdout).
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Optional, TextIO


@dataclass(frozen=True)
class RunReport:
    status: str  # "completed" | "no_records" | "aborted"
    found: int = 0
    success: int = 0
    errors: int = 0
    deleted: int = 0
    request_charge: float = 0.0
    message: Optional[str] = None

    @property
    def total(self) -> int:
        return self.found

    @classmethod
    def aborted(cls, message: str) -> "RunReport":
        return cls(status="aborted", message=message)

    @classmethod
    def no_records(cls) -> "RunReport":
        return cls(status="no_records", message="No se encontraron conexiones para subir.")

    def render(self) -> list[str]:
        lines: list[str] = []
        if self.message:
            lines.append(self.message)
        if self.status == "completed":
            lines.append("")
            lines.append("=== Upload Complete ===")
        lines.append(f"Found: {self.found}")
        lines.append(f"Success: {self.success}")
        lines.append(f"Errors: {self.errors}")
        lines.append(f"Total: {self.total}")
        return lines

    def emit(self, stream: Optional[TextIO] = None) -> None:
        out = stream or sys.stdout
        for line in self.render():
            print(line, file=out)
