"""Configuration for Kwik.

Defines the tunable parameters of a store instance.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class KwikConfig:
    """Configuration parameters for a Kwik store.

    Attributes:
        data_dir: Root directory holding one subdirectory per table.
            None means a ``db`` directory next to the running main script.
        extension: File extension of document files (without the dot)
        fsync_writes: Whether to fsync each document before moving it into place
        builtin_extensions: Register codec extensions for datetime, date,
            UUID and Decimal
    """

    data_dir: str | None = None
    extension: str = "kwik"
    fsync_writes: bool = False
    builtin_extensions: bool = True
