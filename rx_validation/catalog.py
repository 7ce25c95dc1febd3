"""Immutable medication catalog snapshot used during one validation pass."""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterable

from .models import MedicationCatalogEntry, PrescriptionLine, SelectedMedication

logger = logging.getLogger(__name__)


class MedicationCatalog:
    """Read-only lookup of catalog entries by medication id."""

    def __init__(self, entries: Iterable[MedicationCatalogEntry] = ()):
        by_id: dict[str, MedicationCatalogEntry] = {}
        for entry in entries:
            if entry.medication_id in by_id:
                logger.warning(f"Duplicate catalog id {entry.medication_id}; keeping first entry")
                continue
            by_id[entry.medication_id] = entry
        self._entries = MappingProxyType(by_id)

    @classmethod
    def from_dicts(cls, records: Iterable[dict]) -> "MedicationCatalog":
        return cls(MedicationCatalogEntry.from_dict(r) for r in records)

    @classmethod
    def from_json(cls, path: str | Path) -> "MedicationCatalog":
        """Load a catalog from a JSON array of medication records."""
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            records = json.load(f)

        if not isinstance(records, list):
            raise ValueError("Catalog must be a JSON array")

        catalog = cls.from_dicts(records)
        logger.info(f"Loaded {len(catalog)} medications from {path}")
        return catalog

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, medication_id) -> bool:
        return str(medication_id) in self._entries

    def __iter__(self):
        return iter(self._entries.values())

    def get(self, medication_id) -> MedicationCatalogEntry | None:
        return self._entries.get(str(medication_id))

    def resolve(self, lines: list[PrescriptionLine]) -> list[SelectedMedication]:
        """Join each line with its catalog entry, preserving line order."""
        return [
            SelectedMedication(index=i, line=line, entry=self.get(line.medication_id))
            for i, line in enumerate(lines)
        ]
