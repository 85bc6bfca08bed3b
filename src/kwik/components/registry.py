"""Table registry implementation.

Maps collection names to table handles for one store instance.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..core.table import KwikTable

logger = logging.getLogger(__name__)


class TableRegistry:
    """Registry of the tables known to a store.

    Invariants:
        - At most one handle per table name; re-registering replaces it
        - Iteration follows registration order
    """

    def __init__(self):
        self._tables: dict[str, KwikTable] = {}

    def register(self, table: KwikTable) -> None:
        """Register table under its name."""
        if table.name in self._tables and self._tables[table.name] is not table:
            logger.warning(f"Replacing registered handle for table {table.name!r}")
        self._tables[table.name] = table

    def unregister(self, name: str) -> KwikTable | None:
        """Forget a table; its directory and documents are left untouched."""
        return self._tables.pop(name, None)

    def get(self, name: str) -> KwikTable | None:
        return self._tables.get(name)

    def names(self) -> list[str]:
        return list(self._tables)

    def __contains__(self, name: object) -> bool:
        return name in self._tables

    def __iter__(self) -> Iterator[KwikTable]:
        return iter(list(self._tables.values()))

    def __len__(self) -> int:
        return len(self._tables)
