"""Catalog loaders"""
from pathlib import Path
from typing import Optional, Union

from config import DATABASE_SUFFIXES, DEFAULT_DATA_DIR
from models.data_models import Catalog

from .csv_loader import CSVCatalogLoader
from .database_manager import DatabaseManager, create_schema
from .parsing import DataLoadError


def load_catalog(source: Optional[Union[str, Path]] = None) -> Catalog:
    """Load a catalog from a CSV directory or an SQLite file (default: DEFAULT_DATA_DIR)."""
    path = Path(source) if source else Path(DEFAULT_DATA_DIR)

    if path.is_dir():
        return CSVCatalogLoader(path).load_catalog()

    if path.suffix.lower() in DATABASE_SUFFIXES:
        if not path.is_file():
            raise DataLoadError(f"Database file not found: {path}")
        with DatabaseManager(str(path)) as db:
            return db.load_catalog()

    raise DataLoadError(f"Unsupported data source: {path}")


__all__ = [
    'CSVCatalogLoader', 'DatabaseManager', 'DataLoadError', 'create_schema', 'load_catalog'
]
