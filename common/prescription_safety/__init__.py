"""Shared result models for prescription safety validation."""

from .models import (
    FlagSeverity,
    FlagType,
    ValidationFlag,
    ValidationResult,
)

__all__ = [
    "FlagSeverity",
    "FlagType",
    "ValidationFlag",
    "ValidationResult",
]
