"""Data models for the prescription validation rules engine."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from common.prescription_safety import FlagSeverity, FlagType


def _pick(data: dict, *keys, default=None):
    """Return the first key present in ``data`` (snake_case or camelCase)."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def parse_date(value) -> date | None:
    """Parse an ISO date (or datetime) string into a date."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


@dataclass(frozen=True)
class MedicationCatalogEntry:
    """Reference data for one prescribable drug, supplied by the catalog."""
    medication_id: str
    drug_name: str
    generic_name: str = ""
    category: str = ""
    strength: str = ""
    dosage_form: str = ""
    manufacturer: str = ""
    current_stock: float | None = None
    expiry_date: date | None = None
    is_active: bool = True
    common_instructions: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "MedicationCatalogEntry":
        """Create from a catalog record (snake_case or camelCase keys)."""
        stock = _pick(data, "current_stock", "currentStock")
        return cls(
            medication_id=str(_pick(data, "medication_id", "id", "medicationId")),
            drug_name=_pick(data, "drug_name", "drugName", "name", default=""),
            generic_name=_pick(data, "generic_name", "genericName", default=""),
            category=_pick(data, "category", default=""),
            strength=_pick(data, "strength", default=""),
            dosage_form=_pick(data, "dosage_form", "dosageForm", "form", default=""),
            manufacturer=_pick(data, "manufacturer", default=""),
            current_stock=float(stock) if stock is not None else None,
            expiry_date=parse_date(_pick(data, "expiry_date", "expiryDate")),
            is_active=bool(_pick(data, "is_active", "isActive", default=True)),
            common_instructions=_pick(data, "common_instructions", "commonInstructions"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "medication_id": self.medication_id,
            "drug_name": self.drug_name,
            "generic_name": self.generic_name,
            "category": self.category,
            "strength": self.strength,
            "dosage_form": self.dosage_form,
            "manufacturer": self.manufacturer,
            "current_stock": self.current_stock,
            "expiry_date": self.expiry_date.isoformat() if self.expiry_date else None,
            "is_active": self.is_active,
            "common_instructions": self.common_instructions,
        }


@dataclass
class PrescriptionLine:
    """One ordered drug within a draft.

    Quantity is kept as typed (string or number) so that decimal-place rules
    can look at what the prescriber actually entered.
    """
    medication_id: str
    dosage: str = ""
    frequency: str = ""
    quantity: Any = ""
    instructions: str = ""
    route: str = "Oral"
    notes: str | None = None
    is_urgent: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "PrescriptionLine":
        """Create from a console payload line (snake_case or camelCase keys)."""
        return cls(
            medication_id=str(_pick(data, "medication_id", "medicationId", "id")),
            dosage=_pick(data, "dosage", "dose", default=""),
            frequency=_pick(data, "frequency", default=""),
            quantity=_pick(data, "quantity", default=""),
            instructions=_pick(data, "instructions", default=""),
            route=_pick(data, "route", default="Oral"),
            notes=_pick(data, "notes"),
            is_urgent=bool(_pick(data, "is_urgent", "isUrgent", default=False)),
        )


@dataclass(frozen=True)
class SelectedMedication:
    """A prescription line joined with its catalog entry.

    ``entry`` is None when the line references an id the catalog does not know.
    """
    index: int
    line: PrescriptionLine
    entry: MedicationCatalogEntry | None

    @property
    def key(self) -> str:
        return f"medication_{self.index}"

    @property
    def drug_name(self) -> str:
        return self.entry.drug_name if self.entry else ""

    @property
    def generic_name(self) -> str:
        return self.entry.generic_name if self.entry else ""

    @property
    def category(self) -> str:
        return self.entry.category if self.entry else ""

    @property
    def dosage_form(self) -> str:
        return self.entry.dosage_form if self.entry else ""

    @property
    def current_stock(self) -> float | None:
        return self.entry.current_stock if self.entry else None


@dataclass
class PatientSelection:
    """The patient a prescription is being written for."""
    national_id: str | None
    name: str | None
    admission_id: str | None = None
    ward_name: str | None = None
    bed_number: str | None = None

    @classmethod
    def from_dict(cls, data: dict | None) -> "PatientSelection | None":
        if not data:
            return None
        return cls(
            national_id=_pick(data, "national_id", "nationalId", "patient_id", "id"),
            name=_pick(data, "name", "fullName", "patient_name"),
            admission_id=_pick(data, "admission_id", "admissionId"),
            ward_name=_pick(data, "ward_name", "wardName", "ward"),
            bed_number=_pick(data, "bed_number", "bedNumber", "bed"),
        )


@dataclass
class PrescriptionDraft:
    """The in-progress prescription being edited."""
    patient: PatientSelection | None
    lines: list[PrescriptionLine] = field(default_factory=list)
    start_date: date | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "PrescriptionDraft":
        """Create from a console payload."""
        return cls(
            patient=PatientSelection.from_dict(_pick(data, "patient")),
            lines=[
                PrescriptionLine.from_dict(line)
                for line in _pick(data, "medications", "lines", default=[])
            ],
            start_date=parse_date(_pick(data, "start_date", "startDate")),
        )


@dataclass(frozen=True)
class FieldIssue:
    """Outcome of a single field check, before it is attached to a line."""
    flag_type: FlagType
    message: str
    severity: FlagSeverity = FlagSeverity.ERROR
    details: dict | None = None


@dataclass
class ValidationContext:
    """Everything a rule module needs to evaluate one draft."""
    draft: PrescriptionDraft
    medications: list[SelectedMedication]
    today: date
    config: dict = field(default_factory=dict)

    @property
    def patient(self) -> PatientSelection | None:
        return self.draft.patient
