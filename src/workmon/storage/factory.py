"""
Factory for creating table storage instances.
"""

import logging

from ..models.config import StorageConfig
from .base import TableStorage
from .polars_storage import PolarsTableStorage

logger = logging.getLogger(__name__)


def create_storage(storage_config: StorageConfig) -> TableStorage:
    """
    Create the table sink configured by `storage_config`.

    Raises:
        ValueError: If an unsupported format type is specified
    """
    logger.debug(f"Creating table storage for format: {storage_config.format}")
    return PolarsTableStorage(format_type=storage_config.format)
