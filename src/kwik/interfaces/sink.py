"""Protocol definition for the diagnostic sink."""

from __future__ import annotations

from typing import Protocol


class DiagnosticSink(Protocol):
    """Terminal consumer of non-fatal failure reports.

    Must not raise and has no return value.
    """

    def __call__(self, message: str, error: BaseException | None = None) -> None:
        ...
