"""
Excepciones de la carga: configuración y origen de registros.

Solo estas excepciones cortan la corrida. Los errores del destino
(Cosmos DB) se capturan por registro y terminan como contadores/logs.
"""
from upload_items.shared.exceptions.base import UploadItemsException


class ConfigurationError(UploadItemsException):
    """Falta configuración obligatoria o tiene un valor inválido."""

    def __init__(self, message: str, setting: str = None):
        details = {"setting": setting} if setting else None
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=details
        )


class SourceUnavailableError(UploadItemsException):
    """El origen relacional falló y la política no permite fallback."""

    def __init__(self, message: str, reason: str = None):
        super().__init__(
            message=message,
            error_code="SOURCE_UNAVAILABLE",
            details={"reason": reason} if reason else None
        )


class SourceMissingError(UploadItemsException):
    """No existe el archivo snapshot de conexiones."""

    def __init__(self, path: str):
        super().__init__(
            message=f"No se encontró el archivo de conexiones '{path}'",
            error_code="SOURCE_MISSING",
            details={"path": str(path)}
        )
