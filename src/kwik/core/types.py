"""Common type definitions for Kwik.

Defines fundamental types used across all components.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

# Core primitive types
DocumentId = str
Document = Any
Patch = Mapping[str, Any]
Entry = tuple[DocumentId, Document]
