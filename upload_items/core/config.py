"""
Configuracion central de la herramienta.
Gestiona variables de entorno (.env) y, opcionalmente, un appsettings.json
con las secciones CosmosDb / SqlServer / ConnectionsDefaults.
"""
import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import Field, ValidationError, computed_field
from pydantic_settings import BaseSettings

from upload_items.shared.exceptions import ConfigurationError


DEFAULT_SQL_QUERY = "SELECT clientId, servidor, [user], password, repository FROM Clients"


class SourceFailurePolicy(str, Enum):
    """Que hacer si la consulta SQL falla."""

    STRICT = "strict"
    FALLBACK = "fallback"


class ReconcileMode(str, Enum):
    """Como se limpia el contenedor destino."""

    DRAIN = "drain"
    PRUNE = "prune"


class Settings(BaseSettings):
    """
    Clase de configuracion de la carga.
    Lee variables de entorno y proporciona valores por defecto.

    - COSMOS_*: destino (endpoint, key, database, container)
    - SQL_*: origen relacional; si SQL_CONNECTION_STRING esta vacio se lee el snapshot
    - DEFAULT_*: valores compartidos que se mezclan en cada registro
    - SOURCE_FAILURE_POLICY: 'strict' (default) o 'fallback'
    - RECONCILE_MODE: 'drain' (default) o 'prune'
    """

    # Cosmos DB
    COSMOS_ENDPOINT: str = Field(default="")
    COSMOS_KEY: str = Field(default="")
    COSMOS_DATABASE: str = Field(default="")
    COSMOS_CONTAINER: str = Field(default="")

    # SQL Server (o cualquier URL SQLAlchemy)
    SQL_CONNECTION_STRING: str = Field(default="")
    SQL_QUERY: str = Field(default=DEFAULT_SQL_QUERY)
    SQL_ODBC_DRIVER: str = Field(default="ODBC Driver 18 for SQL Server")
    # True replica la variante endurecida: sin SQL no se permite leer el snapshot
    SQL_REQUIRED: bool = Field(default=False)

    # Defaults compartidos (ConnectionsDefaults)
    DEFAULT_CLIENT_NAME: str = Field(default="")
    DEFAULT_PUERTO: str = Field(default="")
    DEFAULT_ADAPTER: str = Field(default="")

    # Snapshot / politicas
    SNAPSHOT_PATH: str = Field(default="connections.json")
    SOURCE_FAILURE_POLICY: SourceFailurePolicy = Field(default=SourceFailurePolicy.STRICT)
    RECONCILE_MODE: ReconcileMode = Field(default=ReconcileMode.DRAIN)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="")

    @computed_field
    @property
    def sql_configured(self) -> bool:
        """Indica si hay un origen relacional configurado (no vacio)."""
        return bool(self.SQL_CONNECTION_STRING and self.SQL_CONNECTION_STRING.strip())

    def validate_destination(self) -> None:
        """Valida que el destino Cosmos este completo antes de cualquier I/O."""
        if not self.COSMOS_ENDPOINT or not self.COSMOS_KEY:
            raise ConfigurationError(
                "Configura COSMOS_ENDPOINT y COSMOS_KEY (o CosmosDb:Endpoint/Key en appsettings.json)",
                setting="COSMOS_ENDPOINT",
            )
        if not self.COSMOS_DATABASE or not self.COSMOS_CONTAINER:
            raise ConfigurationError(
                "Configura COSMOS_DATABASE y COSMOS_CONTAINER",
                setting="COSMOS_CONTAINER",
            )

    @classmethod
    def from_appsettings(cls, path: Union[str, Path], **overrides: Any) -> "Settings":
        """
        Construye Settings a partir de un appsettings.json.

        Los valores del archivo pisan a las variables de entorno; `overrides`
        (p.ej. flags del CLI) pisan a ambos.
        """
        file_path = Path(path)
        if not file_path.exists():
            raise ConfigurationError(f"No existe el archivo de configuracion '{file_path}'", setting="config")
        try:
            payload = json.loads(file_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"appsettings invalido ({file_path}): {e}", setting="config") from e

        values = _flatten_appsettings(payload if isinstance(payload, dict) else {})
        values.update({k: v for k, v in overrides.items() if v is not None})
        return load_settings(**values)

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


# Seccion -> {clave en appsettings.json: campo Settings}
_APPSETTINGS_MAP: Dict[str, Dict[str, str]] = {
    "CosmosDb": {
        "Endpoint": "COSMOS_ENDPOINT",
        "Key": "COSMOS_KEY",
        "DatabaseName": "COSMOS_DATABASE",
        "ContainerName": "COSMOS_CONTAINER",
    },
    "SqlServer": {
        "ConnectionString": "SQL_CONNECTION_STRING",
        "Query": "SQL_QUERY",
    },
    "ConnectionsDefaults": {
        "clientName": "DEFAULT_CLIENT_NAME",
        "puerto": "DEFAULT_PUERTO",
        "adapter": "DEFAULT_ADAPTER",
    },
}


def _flatten_appsettings(payload: Dict[str, Any]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for section_name, keys in _APPSETTINGS_MAP.items():
        section = payload.get(section_name)
        if not isinstance(section, dict):
            continue
        for key, field_name in keys.items():
            raw = section.get(key)
            if raw is not None:
                values[field_name] = str(raw)
    return values


def load_settings(config_path: Optional[Union[str, Path]] = None, **overrides: Any) -> Settings:
    """
    Punto unico para crear Settings.

    Convierte errores de validacion de pydantic en ConfigurationError.
    """
    if config_path:
        return Settings.from_appsettings(config_path, **overrides)
    try:
        return Settings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        raise ConfigurationError(f"Configuracion invalida: {e}") from e
