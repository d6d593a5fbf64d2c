"""Identifier generation helpers."""

from __future__ import annotations

import uuid


def new_line_item_id() -> str:
    """Create a UUID4-based identifier for deal line items.

    Line item ids are generated client-side as well, so they are plain
    strings rather than database sequence values.
    """
    return str(uuid.uuid4())


def format_invoice_number(sequence: int, prefix: str = "INV") -> str:
    """Render a sequential invoice number such as ``INV-0007``."""
    return f"{prefix}-{sequence:04d}"
