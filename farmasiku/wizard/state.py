# farmasiku/wizard/state.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Tuple

from farmasiku.catalog.schema import Medication
from farmasiku.wizard.schema import Assessment
from farmasiku.wizard.steps import WizardStep


@dataclass(frozen=True)
class WizardState:
    """
    Snapshot of one symptom-checker run.

    Never mutated: every transition builds a new instance with
    dataclasses.replace, so a state can be kept, compared or replayed.
    """

    step: WizardStep = WizardStep.AGE
    user_age: Optional[int] = None

    # Body part chosen first, and the one currently being browsed
    selected_body_part: Optional[str] = None
    current_body_part: Optional[str] = None
    is_selecting_more: bool = False

    # Symptom ids in selection order, no duplicates
    selected_symptoms: Tuple[str, ...] = ()
    symptom_assessments: Dict[str, Assessment] = field(default_factory=dict)
    current_symptom_for_assessment: Optional[str] = None

    show_danger_warning: bool = False
    # Danger symptoms the user chose to continue past
    acknowledged_dangers: FrozenSet[str] = frozenset()

    selected_medications: Tuple[Medication, ...] = ()

    session_id: Optional[str] = None
    last_order_id: Optional[str] = None

    # Inline message for the current screen (validation or order failure)
    error: Optional[str] = None

    @property
    def unassessed_symptoms(self) -> Tuple[str, ...]:
        return tuple(s for s in self.selected_symptoms if s not in self.symptom_assessments)

    @property
    def total_price(self) -> float:
        return round(sum(m.price for m in self.selected_medications), 2)
