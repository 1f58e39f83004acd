# farmasiku/catalog/data.py
"""
Static reference data for the symptom checker.

Body parts, the symptoms offered for each one, the symptoms that must
trigger the danger warning, and the over-the-counter medication catalog.
"""
from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, List, Optional

from farmasiku.catalog.schema import BodyPart, SymptomInfo, Medication


BODY_PARTS: List[BodyPart] = [
    BodyPart(id="head", name="Head", icon="🧠"),
    BodyPart(id="throat", name="Throat & Nose", icon="👃"),
    BodyPart(id="chest", name="Chest", icon="🫁"),
    BodyPart(id="stomach", name="Stomach", icon="🫃"),
    BodyPart(id="skin", name="Skin", icon="🖐️"),
    BodyPart(id="muscles", name="Muscles & Joints", icon="💪"),
]


def _symptoms(body_part: str, *pairs: tuple[str, str]) -> List[SymptomInfo]:
    return [SymptomInfo(id=sid, name=name, body_part=body_part) for sid, name in pairs]


SYMPTOMS_BY_BODY_PART: Dict[str, List[SymptomInfo]] = {
    "head": _symptoms(
        "head",
        ("headache", "Headache"),
        ("migraine", "Migraine"),
        ("dizziness", "Dizziness"),
        ("fever", "Fever"),
        ("severe-headache", "Sudden severe headache"),
    ),
    "throat": _symptoms(
        "throat",
        ("sore-throat", "Sore throat"),
        ("runny-nose", "Runny nose"),
        ("blocked-nose", "Blocked nose"),
        ("cough", "Cough"),
        ("sneezing", "Sneezing"),
    ),
    "chest": _symptoms(
        "chest",
        ("chest-pain", "Chest pain"),
        ("shortness-of-breath", "Shortness of breath"),
        ("chesty-cough", "Chesty cough"),
        ("heartburn", "Heartburn"),
    ),
    "stomach": _symptoms(
        "stomach",
        ("stomach-ache", "Stomach ache"),
        ("diarrhea", "Diarrhoea"),
        ("constipation", "Constipation"),
        ("nausea", "Nausea"),
        ("bloody-stool", "Blood in stool"),
    ),
    "skin": _symptoms(
        "skin",
        ("itching", "Itching"),
        ("rash", "Rash"),
        ("acne", "Acne"),
        ("minor-burn", "Minor burn"),
    ),
    "muscles": _symptoms(
        "muscles",
        ("muscle-pain", "Muscle pain"),
        ("joint-pain", "Joint pain"),
        ("back-pain", "Back pain"),
        ("sprain", "Sprain"),
    ),
}

DANGEROUS_SYMPTOMS: FrozenSet[str] = frozenset(
    {
        "chest-pain",
        "shortness-of-breath",
        "severe-headache",
        "bloody-stool",
    }
)

MEDICATIONS: List[Medication] = [
    Medication(
        id="paracetamol-500",
        name="Paracetamol 500mg",
        price=8.50,
        description="Pain and fever relief.",
        dosage="1-2 tablets every 4-6 hours, max 8 tablets a day",
        symptoms=["headache", "fever", "muscle-pain", "sore-throat"],
        min_age=12,
    ),
    Medication(
        id="paracetamol-syrup",
        name="Children's Paracetamol Syrup 120mg/5ml",
        price=12.90,
        description="Pain and fever relief for children.",
        dosage="5-10ml every 4-6 hours depending on age",
        symptoms=["headache", "fever", "sore-throat"],
        min_age=1,
        max_age=11,
    ),
    Medication(
        id="ibuprofen-200",
        name="Ibuprofen 200mg",
        price=10.90,
        description="Anti-inflammatory pain relief.",
        dosage="1-2 tablets every 6-8 hours with food",
        symptoms=["headache", "migraine", "muscle-pain", "joint-pain", "back-pain", "sprain", "fever"],
        min_age=12,
    ),
    Medication(
        id="migraine-relief",
        name="Migraine Relief Caplets",
        price=18.50,
        dosage="2 caplets at onset, max 2 doses a day",
        symptoms=["migraine"],
        min_age=18,
    ),
    Medication(
        id="travel-calm",
        name="Dimenhydrinate 50mg",
        price=9.80,
        description="Relief of dizziness and nausea.",
        dosage="1 tablet every 4-6 hours",
        symptoms=["dizziness", "nausea"],
        min_age=12,
    ),
    Medication(
        id="throat-lozenges",
        name="Antiseptic Throat Lozenges",
        price=7.20,
        dosage="Dissolve 1 lozenge every 2-3 hours",
        symptoms=["sore-throat", "cough"],
        min_age=6,
    ),
    Medication(
        id="cetirizine-10",
        name="Cetirizine 10mg",
        price=15.00,
        description="Non-drowsy antihistamine.",
        dosage="1 tablet once a day",
        symptoms=["runny-nose", "sneezing", "itching", "rash"],
        min_age=6,
    ),
    Medication(
        id="saline-spray",
        name="Saline Nasal Spray",
        price=11.50,
        dosage="1-2 sprays per nostril as needed",
        symptoms=["blocked-nose", "runny-nose"],
        min_age=2,
    ),
    Medication(
        id="dry-cough-syrup",
        name="Dextromethorphan Cough Syrup",
        price=13.40,
        dosage="10ml every 6 hours",
        symptoms=["cough"],
        min_age=12,
    ),
    Medication(
        id="expectorant",
        name="Guaifenesin Expectorant",
        price=14.20,
        dosage="10ml every 4 hours",
        symptoms=["chesty-cough"],
        min_age=12,
    ),
    Medication(
        id="antacid",
        name="Antacid Chewable Tablets",
        price=6.90,
        dosage="Chew 1-2 tablets after meals",
        symptoms=["heartburn", "stomach-ache"],
        min_age=12,
    ),
    Medication(
        id="oral-rehydration",
        name="Oral Rehydration Salts",
        price=5.50,
        dosage="Dissolve 1 sachet in 200ml water after each loose stool",
        symptoms=["diarrhea"],
        min_age=1,
    ),
    Medication(
        id="loperamide-2",
        name="Loperamide 2mg",
        price=9.90,
        dosage="2 capsules initially, then 1 after each loose stool",
        symptoms=["diarrhea"],
        min_age=12,
    ),
    Medication(
        id="lactulose",
        name="Lactulose Solution",
        price=16.80,
        dosage="15ml once or twice a day",
        symptoms=["constipation"],
        min_age=1,
    ),
    Medication(
        id="calamine",
        name="Calamine Lotion",
        price=8.00,
        dosage="Apply to affected area 2-3 times a day",
        symptoms=["itching", "rash"],
        min_age=0,
    ),
    Medication(
        id="benzoyl-peroxide",
        name="Benzoyl Peroxide 5% Gel",
        price=19.90,
        dosage="Apply thinly once or twice a day",
        symptoms=["acne"],
        min_age=12,
    ),
    Medication(
        id="burn-gel",
        name="Burn Relief Gel",
        price=12.00,
        dosage="Apply to the burn 3-4 times a day",
        symptoms=["minor-burn"],
        min_age=0,
    ),
    Medication(
        id="diclofenac-gel",
        name="Diclofenac Topical Gel",
        price=22.50,
        dosage="Rub into the painful area 3-4 times a day",
        symptoms=["muscle-pain", "joint-pain", "back-pain", "sprain"],
        min_age=14,
    ),
]


_BODY_PARTS_BY_ID: Dict[str, BodyPart] = {bp.id: bp for bp in BODY_PARTS}
_SYMPTOMS_BY_ID: Dict[str, SymptomInfo] = {
    s.id: s for symptoms in SYMPTOMS_BY_BODY_PART.values() for s in symptoms
}
_MEDICATIONS_BY_ID: Dict[str, Medication] = {m.id: m for m in MEDICATIONS}


def get_body_part(body_part_id: str) -> Optional[BodyPart]:
    return _BODY_PARTS_BY_ID.get(body_part_id)


def get_symptom(symptom_id: str) -> Optional[SymptomInfo]:
    return _SYMPTOMS_BY_ID.get(symptom_id)


def get_medication(medication_id: str) -> Optional[Medication]:
    return _MEDICATIONS_BY_ID.get(medication_id)


def medications_for(symptoms: Iterable[str], age: Optional[int]) -> List[Medication]:
    """
    Medications recommended for any of the given symptoms that are
    suitable for the given age, in catalog order without duplicates.
    """
    wanted = set(symptoms)
    if not wanted:
        return []

    return [
        med
        for med in MEDICATIONS
        if wanted.intersection(med.symptoms) and med.suitable_for_age(age)
    ]
