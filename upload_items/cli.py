"""
CLI: conexiones (SQL Server / connections.json) -> Cosmos DB (carga one-shot).

Variables de entorno (o appsettings.json con --config):
  - COSMOS_ENDPOINT, COSMOS_KEY, COSMOS_DATABASE, COSMOS_CONTAINER
  - SQL_CONNECTION_STRING (opcional), SQL_QUERY (opcional)
  - DEFAULT_CLIENT_NAME, DEFAULT_PUERTO, DEFAULT_ADAPTER

Ejecución:
  upload-items
  upload-items --config appsettings.json
  upload-items --source-policy fallback --reconcile-mode prune
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv
from loguru import logger

from upload_items.core.config import ReconcileMode, SourceFailurePolicy, load_settings
from upload_items.core.logging import configure_logging
from upload_items.infrastructure.external.cosmos_sync.report import RunReport
from upload_items.infrastructure.external.cosmos_sync.sync_service import build_from_settings
from upload_items.shared.exceptions import UploadItemsException


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="upload-items")
    parser.add_argument(
        "--config",
        help="Ruta a un appsettings.json (secciones CosmosDb, SqlServer, ConnectionsDefaults).",
        default=None,
    )
    parser.add_argument(
        "--env-file",
        help="Archivo .env a cargar antes de leer la configuración (default: ./.env).",
        default=".env",
    )
    parser.add_argument(
        "--snapshot",
        help="Ruta del snapshot de conexiones (default: connections.json).",
        default=None,
    )
    parser.add_argument(
        "--source-policy",
        choices=[p.value for p in SourceFailurePolicy],
        default=None,
        help="Qué hacer si la consulta SQL falla: strict (abortar) o fallback (usar el snapshot).",
    )
    parser.add_argument(
        "--reconcile-mode",
        choices=[m.value for m in ReconcileMode],
        default=None,
        help="drain: borrar todo y luego subir. prune: subir y luego borrar lo que sobra.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Mostrar mensajes de debug (incluye el JSON de cada documento, sin password).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    env_file = Path(args.env_file)
    if env_file.exists():
        load_dotenv(env_file, override=False)

    overrides = {
        "SNAPSHOT_PATH": args.snapshot,
        "SOURCE_FAILURE_POLICY": args.source_policy,
        "RECONCILE_MODE": args.reconcile_mode,
    }

    try:
        settings = load_settings(args.config, **overrides)
    except UploadItemsException as e:
        configure_logging("DEBUG" if args.verbose else "INFO")
        logger.error(e.message)
        RunReport.aborted(f"Error: {e.message}").emit()
        return e.exit_code

    configure_logging("DEBUG" if args.verbose else settings.LOG_LEVEL, settings.LOG_FILE or None)
    logger.info("=== Upload Items to Cosmos DB ===")

    try:
        report = build_from_settings(settings).run_once()
    except UploadItemsException as e:
        logger.error(e.message)
        RunReport.aborted(f"Error: {e.message}").emit()
        return e.exit_code

    report.emit()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
