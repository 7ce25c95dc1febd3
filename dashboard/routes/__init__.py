"""Dashboard routes."""

from .prescription_validation import prescription_validation_bp

__all__ = [
    "prescription_validation_bp",
]
