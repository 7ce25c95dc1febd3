"""Data models for prescription safety validation results."""

from dataclasses import dataclass, field
from enum import Enum


class FlagType(str, Enum):
    """Category of prescription issue detected."""
    PATIENT_NOT_SELECTED = "patient_not_selected"
    PATIENT_INCOMPLETE = "patient_incomplete"
    PATIENT_NOT_ADMITTED = "patient_not_admitted"
    PATIENT_LOCATION_MISSING = "patient_location_missing"
    NO_MEDICATIONS = "no_medications"
    TOO_MANY_MEDICATIONS = "too_many_medications"
    UNKNOWN_MEDICATION = "unknown_medication"
    INACTIVE_MEDICATION = "inactive_medication"
    INVALID_DOSAGE = "invalid_dosage"
    DOSAGE_OUT_OF_RANGE = "dosage_out_of_range"
    INVALID_FREQUENCY = "invalid_frequency"
    INVALID_QUANTITY = "invalid_quantity"
    INSUFFICIENT_STOCK = "insufficient_stock"
    QUANTITY_FORM_MISMATCH = "quantity_form_mismatch"
    CONTROLLED_QUANTITY_EXCEEDED = "controlled_quantity_exceeded"
    INVALID_INSTRUCTIONS = "invalid_instructions"
    UNSAFE_INSTRUCTIONS = "unsafe_instructions"
    CONTRADICTORY_INSTRUCTIONS = "contradictory_instructions"
    EXPIRED = "expired"
    EXPIRING_SOON = "expiring_soon"
    INVALID_EXPIRY_DATE = "invalid_expiry_date"
    DUPLICATE_DRUG = "duplicate_drug"
    DUPLICATE_INGREDIENT = "duplicate_ingredient"
    DRUG_INTERACTION = "drug_interaction"
    CATEGORY_OVERLOAD = "category_overload"
    INVALID_START_DATE = "invalid_start_date"
    RULE_FAILURE = "rule_failure"

    @classmethod
    def display_name(cls, value):
        """Get human-readable display name for a flag type."""
        if isinstance(value, cls):
            value = value.value
        return value.replace("_", " ").title() if value else ""


class FlagSeverity(str, Enum):
    """Whether a flag blocks submission or is informational."""
    ERROR = "error"
    WARNING = "warning"

    @classmethod
    def all_options(cls):
        """Get all options as (value, display_name) tuples for dropdowns."""
        return [
            (cls.ERROR.value, "Error"),
            (cls.WARNING.value, "Warning"),
        ]


@dataclass
class ValidationFlag:
    """A single issue found while validating a prescription draft.

    ``key`` is the result bucket (``patient``, ``medications``, ``duplicates``,
    ``medication_<index>``, ...). Line-level flags also carry the ``field``
    they belong to; draft-level flags leave it as None.
    """
    key: str
    flag_type: FlagType
    message: str
    severity: FlagSeverity = FlagSeverity.ERROR
    field: str | None = None
    details: dict | None = None

    @property
    def is_warning(self) -> bool:
        return self.severity == FlagSeverity.WARNING

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "key": self.key,
            "field": self.field,
            "flag_type": self.flag_type.value if isinstance(self.flag_type, FlagType) else self.flag_type,
            "severity": self.severity.value if isinstance(self.severity, FlagSeverity) else self.severity,
            "message": self.message,
            "details": self.details or {},
        }


@dataclass
class ValidationResult:
    """Outcome of validating one prescription draft.

    The ``errors`` mapping keeps one message per key (or per key and field for
    medication lines). When several flags land on the same slot the first one
    recorded wins, so rule modules are run in priority order.

    Warnings are part of ``errors`` unless ``warnings_block`` is False, in
    which case they are only reported through ``warnings``.
    """
    flags: list[ValidationFlag] = field(default_factory=list)
    warnings_block: bool = True

    def add(self, flag: ValidationFlag) -> None:
        self.flags.append(flag)

    def extend(self, flags: list[ValidationFlag]) -> None:
        self.flags.extend(flags)

    @property
    def errors(self) -> dict:
        errors: dict = {}
        for flag in self.flags:
            if flag.is_warning and not self.warnings_block:
                continue
            if flag.field is None:
                errors.setdefault(flag.key, flag.message)
                continue
            bucket = errors.setdefault(flag.key, {})
            if isinstance(bucket, dict):
                bucket.setdefault(flag.field, flag.message)
        return errors

    @property
    def warnings(self) -> list[ValidationFlag]:
        return [f for f in self.flags if f.is_warning]

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def flags_for(self, key: str) -> list[ValidationFlag]:
        """All flags recorded under one result key."""
        return [f for f in self.flags if f.key == key]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "is_valid": self.is_valid,
            "errors": self.errors,
            "warnings": [f.to_dict() for f in self.warnings],
            "flags": [f.to_dict() for f in self.flags],
        }
