from __future__ import annotations


class InvalidArgument(ValueError):
    """Raised when an acknowledgment value would break one of its invariants."""
