"""Utility functions."""

from littag.utils.ids import generate_id
from littag.utils.timestamps import utc_now_iso

__all__ = ["generate_id", "utc_now_iso"]
