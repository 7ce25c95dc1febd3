"""Drug-drug interaction rules between medications on the same prescription.

Each rule names two substances. A substance is either a keyword matched as a
substring of a line's drug or generic name, or a class listed in
DRUG_CLASS_MAPPINGS. A rule fires when its two substances are found on two
different lines. The table is a best-effort static list, not a pharmacology
database; pass a different ``interactions`` list to replace it.
"""

import logging

from common.prescription_safety import FlagType, ValidationFlag
from ..models import SelectedMedication, ValidationContext
from ..rules_engine import BaseRuleModule

logger = logging.getLogger(__name__)


DRUG_INTERACTIONS = [
    # Bleeding risk
    {
        "substance_a": "warfarin",
        "substance_b": "aspirin",
        "category": "bleeding",
        "severity": "major",
        "message": "Warfarin + Aspirin: increased risk of bleeding due to additive anticoagulant and antiplatelet effects",
        "recommendation": "Monitor INR closely and watch for signs of bleeding",
    },
    {
        "substance_a": "warfarin",
        "substance_b": "nsaid",
        "category": "bleeding",
        "severity": "major",
        "message": "Warfarin + NSAID: increased risk of gastrointestinal bleeding",
        "recommendation": "Avoid combination; use paracetamol for analgesia if possible",
    },
    {
        "substance_a": "warfarin",
        "substance_b": "clopidogrel",
        "category": "bleeding",
        "severity": "major",
        "message": "Warfarin + Clopidogrel: high bleeding risk from combined anticoagulant and antiplatelet therapy",
        "recommendation": "Combine only with specialist advice and gastroprotection",
    },
    {
        "substance_a": "aspirin",
        "substance_b": "clopidogrel",
        "category": "bleeding",
        "severity": "moderate",
        "message": "Aspirin + Clopidogrel: dual antiplatelet therapy increases bleeding risk",
        "recommendation": "Confirm indication and intended duration of dual antiplatelet therapy",
    },
    {
        "substance_a": "warfarin",
        "substance_b": "amoxicillin",
        "category": "bleeding",
        "severity": "moderate",
        "message": "Warfarin + Amoxicillin: antibiotics may enhance warfarin effect",
        "recommendation": "Monitor INR more frequently during the antibiotic course",
    },
    {
        "substance_a": "warfarin",
        "substance_b": "metronidazole",
        "category": "bleeding",
        "severity": "major",
        "message": "Warfarin + Metronidazole: metronidazole inhibits warfarin metabolism, raising INR and bleeding risk",
        "recommendation": "Monitor INR closely; consider reducing warfarin dose",
    },
    {
        "substance_a": "warfarin",
        "substance_b": "statin",
        "category": "bleeding",
        "severity": "moderate",
        "message": "Warfarin + Statin: statins may enhance warfarin effect",
        "recommendation": "Monitor INR when starting or stopping the statin",
    },

    # Cardiovascular
    {
        "substance_a": "ace inhibitor",
        "substance_b": "potassium-sparing diuretic",
        "category": "cardiovascular",
        "severity": "major",
        "message": "ACE inhibitor + potassium-sparing diuretic: risk of hyperkalaemia",
        "recommendation": "Monitor serum potassium and renal function",
    },
    {
        "substance_a": "ace inhibitor",
        "substance_b": "nsaid",
        "category": "cardiovascular",
        "severity": "moderate",
        "message": "ACE inhibitor + NSAID: NSAIDs may reduce antihypertensive effect and impair renal function",
        "recommendation": "Monitor blood pressure and kidney function",
    },
    {
        "substance_a": "digoxin",
        "substance_b": "amiodarone",
        "category": "cardiovascular",
        "severity": "major",
        "message": "Digoxin + Amiodarone: amiodarone raises digoxin levels, risk of toxicity",
        "recommendation": "Halve the digoxin dose and monitor levels",
    },
    {
        "substance_a": "sildenafil",
        "substance_b": "nitrate",
        "category": "cardiovascular",
        "severity": "major",
        "message": "Sildenafil + Nitrate: risk of severe hypotension",
        "recommendation": "Do not combine",
    },

    # CNS / serotonin
    {
        "substance_a": "tramadol",
        "substance_b": "ssri",
        "category": "cns",
        "severity": "major",
        "message": "Tramadol + SSRI: risk of serotonin syndrome and lowered seizure threshold",
        "recommendation": "Avoid combination or monitor closely for serotonin toxicity",
    },
    {
        "substance_a": "opioid",
        "substance_b": "benzodiazepine",
        "category": "cns",
        "severity": "major",
        "message": "Opioid + Benzodiazepine: additive CNS and respiratory depression",
        "recommendation": "Use lowest effective doses and monitor sedation and breathing",
    },
    {
        "substance_a": "linezolid",
        "substance_b": "ssri",
        "category": "cns",
        "severity": "major",
        "message": "Linezolid + SSRI: linezolid is an MAO inhibitor, risk of serotonin syndrome",
        "recommendation": "Avoid combination; monitor closely if unavoidable",
    },

    # Diabetic
    {
        "substance_a": "metformin",
        "substance_b": "insulin",
        "category": "diabetic",
        "severity": "moderate",
        "message": "Metformin + Insulin: increased risk of hypoglycaemia",
        "recommendation": "Monitor blood glucose closely and adjust insulin dose",
    },
    {
        "substance_a": "insulin",
        "substance_b": "sulfonylurea",
        "category": "diabetic",
        "severity": "major",
        "message": "Insulin + Sulfonylurea: high risk of hypoglycaemia",
        "recommendation": "Monitor blood glucose; consider reducing the sulfonylurea dose",
    },
    {
        "substance_a": "metformin",
        "substance_b": "nsaid",
        "category": "diabetic",
        "severity": "moderate",
        "message": "Metformin + NSAID: NSAIDs may impair kidney function affecting metformin clearance",
        "recommendation": "Monitor kidney function and blood glucose",
    },

    # Antibiotic
    {
        "substance_a": "ciprofloxacin",
        "substance_b": "theophylline",
        "category": "antibiotic",
        "severity": "major",
        "message": "Ciprofloxacin + Theophylline: ciprofloxacin inhibits theophylline metabolism, risk of toxicity",
        "recommendation": "Monitor theophylline levels; reduce theophylline dose",
    },
    {
        "substance_a": "clarithromycin",
        "substance_b": "simvastatin",
        "category": "antibiotic",
        "severity": "major",
        "message": "Clarithromycin + Simvastatin: raised statin levels, risk of myopathy",
        "recommendation": "Withhold simvastatin during the clarithromycin course",
    },

    # Gastric
    {
        "substance_a": "omeprazole",
        "substance_b": "clopidogrel",
        "category": "gastric",
        "severity": "moderate",
        "message": "Omeprazole + Clopidogrel: omeprazole reduces the antiplatelet effect of clopidogrel",
        "recommendation": "Use pantoprazole if a proton pump inhibitor is needed",
    },
    {
        "substance_a": "nsaid",
        "substance_b": "corticosteroid",
        "category": "gastric",
        "severity": "moderate",
        "message": "NSAID + Corticosteroid: increased risk of peptic ulceration and GI bleeding",
        "recommendation": "Add gastroprotection or avoid the combination",
    },
    {
        "substance_a": "aspirin",
        "substance_b": "nsaid",
        "category": "gastric",
        "severity": "moderate",
        "message": "Aspirin + NSAID: increased risk of GI bleeding and reduced cardioprotective effect of aspirin",
        "recommendation": "Avoid regular concurrent use",
    },

    # Same class
    {
        "substance_a": "ace inhibitor",
        "substance_b": "ace inhibitor",
        "category": "same_class",
        "severity": "major",
        "message": "Two ACE inhibitors prescribed together: therapeutic duplication",
        "recommendation": "Prescribe a single ACE inhibitor",
    },
    {
        "substance_a": "nsaid",
        "substance_b": "nsaid",
        "category": "same_class",
        "severity": "major",
        "message": "Two NSAIDs prescribed together: therapeutic duplication with increased GI and renal risk",
        "recommendation": "Prescribe a single NSAID",
    },
    {
        "substance_a": "ssri",
        "substance_b": "ssri",
        "category": "same_class",
        "severity": "major",
        "message": "Two SSRIs prescribed together: therapeutic duplication and serotonin syndrome risk",
        "recommendation": "Prescribe a single SSRI",
    },
    {
        "substance_a": "statin",
        "substance_b": "statin",
        "category": "same_class",
        "severity": "moderate",
        "message": "Two statins prescribed together: therapeutic duplication",
        "recommendation": "Prescribe a single statin",
    },
    {
        "substance_a": "beta blocker",
        "substance_b": "beta blocker",
        "category": "same_class",
        "severity": "major",
        "message": "Two beta blockers prescribed together: risk of bradycardia and hypotension",
        "recommendation": "Prescribe a single beta blocker",
    },
]


# Drug class mappings for pattern matching
DRUG_CLASS_MAPPINGS = {
    "nsaid": ["ibuprofen", "diclofenac", "naproxen", "celecoxib", "indomethacin", "ketorolac", "mefenamic", "piroxicam"],
    "ace inhibitor": ["lisinopril", "enalapril", "ramipril", "captopril", "perindopril"],
    "potassium-sparing diuretic": ["spironolactone", "amiloride", "eplerenone", "triamterene"],
    "nitrate": ["nitroglycerin", "glyceryl trinitrate", "isosorbide"],
    "ssri": ["fluoxetine", "sertraline", "paroxetine", "citalopram", "escitalopram", "fluvoxamine"],
    "opioid": ["morphine", "codeine", "oxycodone", "tramadol", "fentanyl", "pethidine", "hydromorphone"],
    "benzodiazepine": ["diazepam", "lorazepam", "alprazolam", "midazolam", "clonazepam"],
    "sulfonylurea": ["glibenclamide", "gliclazide", "glimepiride", "glipizide"],
    "statin": ["atorvastatin", "simvastatin", "rosuvastatin", "pravastatin", "lovastatin"],
    "corticosteroid": ["prednisolone", "prednisone", "dexamethasone", "hydrocortisone", "methylprednisolone"],
    "beta blocker": ["atenolol", "metoprolol", "propranolol", "bisoprolol", "carvedilol"],
}


def _name_pool(medication: SelectedMedication) -> list[str]:
    return [n.strip().lower() for n in (medication.drug_name, medication.generic_name) if n and n.strip()]


def substance_matches(medication: SelectedMedication, substance: str) -> bool:
    """Check if a line's drug or generic name matches a keyword or class.

    Args:
        medication: Selected medication line
        substance: Keyword or class name from DRUG_CLASS_MAPPINGS

    Returns:
        True if the line contains the substance
    """
    names = _name_pool(medication)
    substance = substance.strip().lower()

    # Class keywords match members only ("nystatin" is not a statin)
    if substance in DRUG_CLASS_MAPPINGS:
        members = DRUG_CLASS_MAPPINGS[substance]
        return any(member in name for member in members for name in names)

    return any(substance in name for name in names)


def find_interactions(
    medications: list[SelectedMedication],
    interactions: list[dict] | None = None,
) -> list[tuple[dict, SelectedMedication, SelectedMedication]]:
    """Rules whose two substances occur on two different lines.

    Returns (rule, line_a, line_b) in table order; each rule fires at most once.
    """
    table = DRUG_INTERACTIONS if interactions is None else interactions
    hits = []

    for rule in table:
        side_a = [m for m in medications if substance_matches(m, rule["substance_a"])]
        if not side_a:
            continue
        side_b = [m for m in medications if substance_matches(m, rule["substance_b"])]

        pair = next(
            ((a, b) for a in side_a for b in side_b if a.index != b.index),
            None,
        )
        if pair:
            hits.append((rule, pair[0], pair[1]))

    return hits


class DrugInteractionRules(BaseRuleModule):
    """Check for known dangerous pairings across the prescription."""

    def __init__(self, interactions: list[dict] | None = None):
        self.interactions = DRUG_INTERACTIONS if interactions is None else interactions

    def evaluate(self, context: ValidationContext) -> list[ValidationFlag]:
        return self.check(context.medications)

    def check(self, medications: list[SelectedMedication]) -> list[ValidationFlag]:
        flags: list[ValidationFlag] = []

        for rule, line_a, line_b in find_interactions(medications, self.interactions):
            flags.append(ValidationFlag(
                key="duplicates",
                flag_type=FlagType.DRUG_INTERACTION,
                message=rule["message"],
                details={
                    "category": rule.get("category"),
                    "severity": rule.get("severity"),
                    "recommendation": rule.get("recommendation"),
                    "drugs": [line_a.drug_name, line_b.drug_name],
                },
            ))
            logger.info(
                f"Interaction detected: {line_a.drug_name} + {line_b.drug_name} "
                f"({rule.get('category')}, {rule.get('severity')})"
            )

        return flags
