from upload_items.shared.exceptions.base import UploadItemsException
from upload_items.shared.exceptions.domain import (
    ConfigurationError,
    SourceMissingError,
    SourceUnavailableError,
)

__all__ = [
    "UploadItemsException",
    "ConfigurationError",
    "SourceMissingError",
    "SourceUnavailableError",
]
