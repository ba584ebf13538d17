"""Utility modules for the babel_fish backend."""

from .text import safe_truncate, normalize_for_log

__all__ = ["safe_truncate", "normalize_for_log"]
