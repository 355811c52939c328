"""Utility helpers (datetime, id generation)."""

from annoflow.shared.utils.datetime import utc_now
from annoflow.shared.utils.generators import generate_cuid

__all__ = ["generate_cuid", "utc_now"]
