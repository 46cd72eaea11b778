from pixelpack.db.operations import (
    clear_namespace,
    get_record,
    put_record,
)
from pixelpack.db.store import DatabaseStore, KeyValueStore

__all__ = [
    "DatabaseStore",
    "KeyValueStore",
    "clear_namespace",
    "get_record",
    "put_record",
]
