# farmasiku/wizard/machine.py
from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import AbstractSet, Any, Callable, Dict, FrozenSet, List, NamedTuple, Optional, Tuple

from farmasiku import catalog
from farmasiku.wizard import actions as a
from farmasiku.wizard.assessments import prune_assessments, record_assessment
from farmasiku.wizard.danger import dangerous_selected, needs_danger_warning
from farmasiku.wizard.effects import CreateOrder, CreateSession, Effect, SaveAssessment, UpdateSession
from farmasiku.wizard.errors import InvalidTransitionError, WizardValidationError
from farmasiku.wizard.state import WizardState
from farmasiku.wizard.steps import PREDECESSORS, WizardStep

logger = logging.getLogger(__name__)

MIN_AGE = 0
MAX_AGE = 120


class Transition(NamedTuple):
    state: WizardState
    effects: List[Effect]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


_ANY_STEP: FrozenSet[WizardStep] = frozenset(WizardStep)

# Actions still accepted while the danger overlay covers the symptom screen
_OVERLAY_ACTIONS = (
    a.DangerGoToConsultation,
    a.DangerContinue,
    a.CompleteSelection,
    a.Back,
    a.SessionStarted,
)


class WizardMachine:
    """
    WizardMachine is the symptom-checker flow as a reducer:

        transition(state, action) -> Transition(new_state, effects)

    Steps:
      - age
      - body part (repeatable via "more symptoms")
      - symptom selection, with per-symptom assessment
      - confirmation
      - medication -> payment -> success, or consultation

    It never performs I/O. Persistence is requested through the returned
    effects and the driver reports back with SessionStarted / OrderCreated /
    OrderFailed where the outcome matters.
    """

    def __init__(
        self,
        danger_set: Optional[AbstractSet[str]] = None,
        clock: Callable[[], str] = _now_iso,
    ):
        self.danger_set: FrozenSet[str] = frozenset(
            catalog.DANGEROUS_SYMPTOMS if danger_set is None else danger_set
        )
        self.clock = clock

        # action type -> (handler, steps where it is legal)
        self._handlers: Dict[type, Tuple[Callable[..., Transition], FrozenSet[WizardStep]]] = {
            a.SubmitAge: (self._submit_age, frozenset({WizardStep.AGE})),
            a.ChooseBodyPart: (self._choose_body_part, frozenset({WizardStep.BODY_PART})),
            a.ToggleSymptom: (self._toggle_symptom, frozenset({WizardStep.SYMPTOM})),
            a.RequestMoreSymptoms: (self._more_symptoms, frozenset({WizardStep.SYMPTOM})),
            a.StartAssessment: (self._start_assessment, frozenset({WizardStep.SYMPTOM})),
            a.CompleteSelection: (self._complete_selection, frozenset({WizardStep.SYMPTOM})),
            a.DangerGoToConsultation: (self._danger_consultation, frozenset({WizardStep.SYMPTOM})),
            a.DangerContinue: (self._danger_continue, frozenset({WizardStep.SYMPTOM})),
            a.SubmitAssessment: (self._submit_assessment, frozenset({WizardStep.ASSESSMENT})),
            a.ConfirmSymptoms: (self._confirm_symptoms, frozenset({WizardStep.CONFIRMATION})),
            a.ChooseMedications: (self._choose_medications, frozenset({WizardStep.MEDICATION})),
            a.SubmitPayment: (self._submit_payment, frozenset({WizardStep.PAYMENT})),
            a.OrderCreated: (self._order_created, frozenset({WizardStep.PAYMENT})),
            a.OrderFailed: (self._order_failed, frozenset({WizardStep.PAYMENT})),
            a.Back: (self._back, frozenset(PREDECESSORS)),
            a.Reset: (self._reset, frozenset({WizardStep.SUCCESS})),
            a.SessionStarted: (self._session_started, _ANY_STEP),
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def start(self, metadata: Optional[Dict[str, Any]] = None) -> Transition:
        """
        Fresh wizard on the age step, plus the request for a new session.
        """
        return Transition(WizardState(), [self._create_session(metadata)])

    def transition(self, state: WizardState, action: a.Action) -> Transition:
        """
        Apply one action.

        Raises InvalidTransitionError if the action is not legal at the
        current step. Validation problems never raise: the state comes
        back unchanged apart from `error`, with no effects.
        """
        handler = self._lookup(state, action)

        # A message only lives until the next action
        clean = replace(state, error=None) if state.error else state

        try:
            return handler(clean, action)
        except WizardValidationError as exc:
            logger.debug("Validation failed at step %s: %s", state.step.value, exc)
            return Transition(replace(state, error=str(exc)), [])

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _lookup(self, state: WizardState, action: a.Action) -> Callable[..., Transition]:
        entry = self._handlers.get(type(action))
        action_type = type(action).__name__
        if entry is None:
            raise TypeError(f"Unknown wizard action: {action_type}")

        handler, steps = entry
        if state.step not in steps:
            raise InvalidTransitionError(state.step, action_type)

        if state.show_danger_warning:
            if not isinstance(action, _OVERLAY_ACTIONS):
                raise InvalidTransitionError(state.step, action_type)
        elif isinstance(action, (a.DangerGoToConsultation, a.DangerContinue)):
            raise InvalidTransitionError(state.step, action_type)

        return handler

    def _create_session(self, metadata: Optional[Dict[str, Any]] = None) -> CreateSession:
        data = {"startedAt": self.clock()}
        data.update(metadata or {})
        return CreateSession(metadata=data)

    def _update_session(self, state: WizardState, fields: Dict[str, Any]) -> List[Effect]:
        # No session (creation failed or still pending): nothing to update
        if state.session_id is None:
            return []
        return [UpdateSession(session_id=state.session_id, fields=fields)]

    def _selection_resolved(self, state: WizardState) -> bool:
        """True when completing the selection would land on confirmation."""
        return not state.unassessed_symptoms and not needs_danger_warning(
            state.selected_symptoms, self.danger_set, state.acknowledged_dangers
        )

    def _route_after_selection(self, state: WizardState) -> Transition:
        unassessed = state.unassessed_symptoms
        if unassessed:
            return Transition(
                replace(
                    state,
                    step=WizardStep.ASSESSMENT,
                    current_symptom_for_assessment=unassessed[0],
                ),
                [],
            )
        return Transition(replace(state, step=WizardStep.CONFIRMATION), [])

    # ---- age / body part ---------------------------------------------

    def _submit_age(self, state: WizardState, action: a.SubmitAge) -> Transition:
        if action.age is None or not MIN_AGE <= action.age <= MAX_AGE:
            raise WizardValidationError("Please enter a valid age")

        new_state = replace(state, step=WizardStep.BODY_PART, user_age=action.age)
        return Transition(new_state, self._update_session(new_state, {"userAge": action.age}))

    def _choose_body_part(self, state: WizardState, action: a.ChooseBodyPart) -> Transition:
        if catalog.get_body_part(action.body_part) is None:
            raise WizardValidationError(f"Unknown body part '{action.body_part}'")

        new_state = replace(
            state,
            step=WizardStep.SYMPTOM,
            selected_body_part=action.body_part,
            current_body_part=action.body_part,
        )
        return Transition(
            new_state,
            self._update_session(
                new_state,
                {
                    "selectedBodyPart": action.body_part,
                    "bodyPartSelectedAt": self.clock(),
                },
            ),
        )

    # ---- symptom selection -------------------------------------------

    def _toggle_symptom(self, state: WizardState, action: a.ToggleSymptom) -> Transition:
        if action.symptom in state.selected_symptoms:
            # Symptoms picked on an earlier body part can still be removed
            selected = tuple(s for s in state.selected_symptoms if s != action.symptom)
        else:
            symptom = catalog.get_symptom(action.symptom)
            if symptom is None:
                raise WizardValidationError(f"Unknown symptom '{action.symptom}'")

            body_part = state.current_body_part or state.selected_body_part
            if symptom.body_part != body_part:
                raise WizardValidationError(
                    f"'{action.symptom}' is not a symptom of the selected body part"
                )
            selected = state.selected_symptoms + (action.symptom,)

        return Transition(
            replace(
                state,
                selected_symptoms=selected,
                symptom_assessments=prune_assessments(selected, state.symptom_assessments),
            ),
            [],
        )

    def _more_symptoms(self, state: WizardState, action: a.RequestMoreSymptoms) -> Transition:
        return Transition(
            replace(
                state,
                step=WizardStep.BODY_PART,
                is_selecting_more=True,
                current_body_part=None,
            ),
            [],
        )

    def _start_assessment(self, state: WizardState, action: a.StartAssessment) -> Transition:
        if action.symptom not in state.selected_symptoms:
            raise WizardValidationError("Select the symptom before assessing it")

        return Transition(
            replace(
                state,
                step=WizardStep.ASSESSMENT,
                current_symptom_for_assessment=action.symptom,
            ),
            [],
        )

    def _complete_selection(self, state: WizardState, action: a.CompleteSelection) -> Transition:
        """
        Resolution order:
          1. nothing selected -> message, stay
          2. unacknowledged danger symptom -> overlay, stay
          3. unassessed symptom -> assessment for the first one
          4. confirmation
        """
        if state.show_danger_warning:
            # Waiting on the overlay; the user has to pick one of its exits
            return Transition(state, [])

        if not state.selected_symptoms:
            raise WizardValidationError("Please select at least one symptom")

        if needs_danger_warning(state.selected_symptoms, self.danger_set, state.acknowledged_dangers):
            return Transition(replace(state, show_danger_warning=True), [])

        return self._route_after_selection(state)

    def _danger_consultation(self, state: WizardState, action: a.DangerGoToConsultation) -> Transition:
        return Transition(
            replace(state, step=WizardStep.CONSULTATION, show_danger_warning=False),
            [],
        )

    def _danger_continue(self, state: WizardState, action: a.DangerContinue) -> Transition:
        acknowledged = state.acknowledged_dangers | frozenset(
            dangerous_selected(state.selected_symptoms, self.danger_set)
        )
        return self._route_after_selection(
            replace(state, show_danger_warning=False, acknowledged_dangers=acknowledged)
        )

    # ---- assessment --------------------------------------------------

    def _submit_assessment(self, state: WizardState, action: a.SubmitAssessment) -> Transition:
        if action.assessment.symptom != state.current_symptom_for_assessment:
            raise WizardValidationError(
                f"Expected an assessment for '{state.current_symptom_for_assessment}'"
            )

        assessments, symptom = record_assessment(
            state.selected_symptoms,
            state.symptom_assessments,
            action.assessment,
        )
        new_state = replace(
            state,
            step=WizardStep.SYMPTOM,
            symptom_assessments=assessments,
            current_symptom_for_assessment=None,
        )
        record = {
            "sessionId": state.session_id,
            "userAge": state.user_age,
            "bodyPart": state.selected_body_part,
            "symptom": symptom,
            "assessment": action.assessment.model_dump(mode="json"),
            "timestamp": self.clock(),
        }
        return Transition(new_state, [SaveAssessment(record=record)])

    # ---- confirmation / medication / payment -------------------------

    def _confirm_symptoms(self, state: WizardState, action: a.ConfirmSymptoms) -> Transition:
        next_step = WizardStep.CONSULTATION if action.is_more_severe else WizardStep.MEDICATION
        new_state = replace(state, step=next_step)
        return Transition(
            new_state,
            self._update_session(
                new_state,
                {
                    "selectedSymptoms": list(state.selected_symptoms),
                    "symptomAssessments": {
                        k: v.model_dump(mode="json") for k, v in state.symptom_assessments.items()
                    },
                    "isMoreSevere": action.is_more_severe,
                    "confirmedAt": self.clock(),
                },
            ),
        )

    def _choose_medications(self, state: WizardState, action: a.ChooseMedications) -> Transition:
        if not action.medication_ids:
            raise WizardValidationError("Please select at least one medication")

        recommended = {
            m.id: m for m in catalog.medications_for(state.selected_symptoms, state.user_age)
        }
        chosen = []
        for med_id in dict.fromkeys(action.medication_ids):
            med = recommended.get(med_id)
            if med is None:
                raise WizardValidationError(f"'{med_id}' is not recommended for your symptoms")
            chosen.append(med)

        return Transition(
            replace(state, step=WizardStep.PAYMENT, selected_medications=tuple(chosen)),
            [],
        )

    def _submit_payment(self, state: WizardState, action: a.SubmitPayment) -> Transition:
        if not state.selected_medications:
            raise WizardValidationError("Please select at least one medication")

        payment = action.payment
        order = {
            "sessionId": state.session_id,
            "userAge": state.user_age,
            "selectedBodyPart": state.selected_body_part,
            "symptoms": list(state.selected_symptoms),
            "symptomAssessments": {
                k: v.model_dump(mode="json") for k, v in state.symptom_assessments.items()
            },
            "medications": [m.model_dump(mode="json") for m in state.selected_medications],
            "customerInfo": {
                "name": payment.name,
                "email": payment.email,
                "phone": payment.phone,
                "address": payment.address,
            },
            "paymentMethod": payment.payment_method,
            "totalAmount": state.total_price,
            "status": "pending",
            "orderDate": self.clock(),
        }
        # Stay on payment until the driver reports the outcome
        return Transition(state, [CreateOrder(order=order)])

    def _order_created(self, state: WizardState, action: a.OrderCreated) -> Transition:
        return Transition(
            replace(state, step=WizardStep.SUCCESS, last_order_id=action.order_id),
            [],
        )

    def _order_failed(self, state: WizardState, action: a.OrderFailed) -> Transition:
        return Transition(replace(state, error=action.message), [])

    # ---- navigation --------------------------------------------------

    def _back(self, state: WizardState, action: a.Back) -> Transition:
        previous = PREDECESSORS[state.step]
        changes: Dict[str, Any] = {"step": previous}

        if state.step == WizardStep.SYMPTOM:
            changes["current_body_part"] = None
            changes["show_danger_warning"] = False
        elif state.step == WizardStep.ASSESSMENT:
            changes["current_symptom_for_assessment"] = None
        elif state.step == WizardStep.PAYMENT:
            changes["selected_medications"] = ()
        elif state.step == WizardStep.CONSULTATION and not self._selection_resolved(state):
            # Reached from the danger overlay: confirmation was never passed
            changes["step"] = WizardStep.SYMPTOM

        return Transition(replace(state, **changes), [])

    def _reset(self, state: WizardState, action: a.Reset) -> Transition:
        return self.start()

    def _session_started(self, state: WizardState, action: a.SessionStarted) -> Transition:
        return Transition(replace(state, session_id=action.session_id), [])


_default_machine: Optional[WizardMachine] = None


def transition(state: WizardState, action: a.Action) -> Transition:
    """
    Module-level reducer using the catalog's danger-symptom set.
    """
    global _default_machine
    if _default_machine is None:
        _default_machine = WizardMachine()
    return _default_machine.transition(state, action)
