# farmasiku/wizard/assessments.py
from __future__ import annotations

from typing import Dict, Iterable, Tuple

from farmasiku.wizard.errors import WizardValidationError
from farmasiku.wizard.schema import Assessment


def record_assessment(
    selected: Iterable[str],
    assessments: Dict[str, Assessment],
    assessment: Assessment,
) -> Tuple[Dict[str, Assessment], str]:
    """
    Store (or overwrite) the assessment for its symptom.

    Returns the new mapping and the symptom id that was assessed, so the
    caller can log the same record.
    """
    if assessment.symptom not in set(selected):
        raise WizardValidationError(
            f"'{assessment.symptom}' is not one of the selected symptoms"
        )

    updated = dict(assessments)
    updated[assessment.symptom] = assessment
    return updated, assessment.symptom


def prune_assessments(
    selected: Iterable[str],
    assessments: Dict[str, Assessment],
) -> Dict[str, Assessment]:
    """
    Drop assessments whose symptom is no longer selected.
    """
    keep = set(selected)
    return {k: v for k, v in assessments.items() if k in keep}
