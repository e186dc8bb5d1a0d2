from .base import BaseSchema
from .emoticons import Catalog, EmoticonRecord, ImageLocation, ImageStatus, Pack

__all__ = [
    "BaseSchema",
    "Catalog", "EmoticonRecord", "ImageLocation", "ImageStatus", "Pack",
]
