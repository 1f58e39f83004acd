from .schema import BodyPart, SymptomInfo, Medication
from .data import (
    BODY_PARTS,
    SYMPTOMS_BY_BODY_PART,
    DANGEROUS_SYMPTOMS,
    MEDICATIONS,
    get_body_part,
    get_symptom,
    get_medication,
    medications_for,
)

__all__ = [
    "BodyPart",
    "SymptomInfo",
    "Medication",
    "BODY_PARTS",
    "SYMPTOMS_BY_BODY_PART",
    "DANGEROUS_SYMPTOMS",
    "MEDICATIONS",
    "get_body_part",
    "get_symptom",
    "get_medication",
    "medications_for",
]
