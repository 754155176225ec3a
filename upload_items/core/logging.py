"""
Configuracion de loguru para la carga.

El transcript registro-por-registro va a stderr (y a archivo si se pide);
el resumen final se imprime aparte por stdout.
"""
import sys
from typing import Optional

from loguru import logger


CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {message}"


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Reemplaza el handler por defecto de loguru.

    Args:
        level: Nivel minimo para consola y archivo
        log_file: Ruta opcional de archivo (rotacion diaria, 10 dias)
    """
    logger.remove()
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)
    if log_file:
        logger.add(
            log_file,
            level=level,
            format=FILE_FORMAT,
            rotation="1 day",
            retention="10 days",
        )
