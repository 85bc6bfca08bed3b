"""Kwik core: store context and tables."""

from .store import Kwik
from .table import KwikTable

__all__ = ["Kwik", "KwikTable"]
