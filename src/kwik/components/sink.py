"""Diagnostic sink implementations.

A sink receives every non-fatal failure a table swallows at its boundary.
"""

from __future__ import annotations

import logging

logger = logging.getLogger("kwik")


class LoggingSink:
    """Forwards diagnostics to a logger at error level.

    Args:
        target: Logger to write to; the ``kwik`` logger by default
    """

    def __init__(self, target: logging.Logger | None = None):
        self.logger = target if target is not None else logger

    def __call__(self, message: str, error: BaseException | None = None) -> None:
        if error is None:
            self.logger.error(message)
        else:
            self.logger.error(f"{message}: {error}")


class RecordingSink:
    """Keeps diagnostics in memory, mainly for tests and tooling."""

    def __init__(self):
        self.records: list[tuple[str, BaseException | None]] = []

    def __call__(self, message: str, error: BaseException | None = None) -> None:
        self.records.append((message, error))

    def errors_of(self, error_type: type[BaseException]) -> list[BaseException]:
        """Return recorded errors that are instances of error_type."""
        return [e for _, e in self.records if isinstance(e, error_type)]

    def clear(self) -> None:
        self.records.clear()

    def __len__(self) -> int:
        return len(self.records)
