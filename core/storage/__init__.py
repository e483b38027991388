from .storage_service import (
    ObjectRange,
    RangeNotSatisfiable,
    StorageService,
    StoredFile,
    get_storage_service,
    parse_range_header,
)

__all__ = [
    "ObjectRange",
    "RangeNotSatisfiable",
    "StorageService",
    "StoredFile",
    "get_storage_service",
    "parse_range_header",
]
