from .memory_row_store import InMemoryRowStore
from .repository import RowStore, TableSnapshot

__all__ = ["InMemoryRowStore", "RowStore", "TableSnapshot"]
