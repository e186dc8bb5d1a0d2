from .catalog_loader import CatalogLoadError, load_catalog
from .delimited_parser import parse_delimited
from .filter_engine import ALL_PACKS, filter_emoticons
from .image_locator import DisabledImageProbe, HttpImageProbe, ImageProbe, resolve_image
from .record_joiner import build_packs, join_records

__all__ = [
    "CatalogLoadError", "load_catalog",
    "parse_delimited",
    "ALL_PACKS", "filter_emoticons",
    "DisabledImageProbe", "HttpImageProbe", "ImageProbe", "resolve_image",
    "build_packs", "join_records",
]
