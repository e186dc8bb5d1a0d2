from .catalog import get_catalog, get_catalog_repository

__all__ = ["get_catalog", "get_catalog_repository"]
