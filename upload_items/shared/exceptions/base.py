"""
Error que corta una corrida de carga.

El CLI lo atrapa en un solo lugar: loguea `message`, imprime el reporte
vacío y termina el proceso con `exit_code`.
"""
from typing import Optional, Dict, Any


class UploadItemsException(Exception):
    """
    Raíz de los errores fatales de upload-items.

    Los fallos de un registro puntual (un UPSERT o DELETE rechazado) no
    usan esta jerarquía: se cuentan en el reporte y la corrida sigue.
    """

    def __init__(
        self,
        message: str,
        exit_code: int = 1,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Args:
            message: Texto que ve el operador en el log y en stdout
            exit_code: Código con que termina el proceso
            error_code: Identificador estable del tipo de fallo (p.ej. SOURCE_MISSING)
            details: Datos de contexto (setting, path, motivo), para logs
        """
        self.message = message
        self.exit_code = exit_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)
