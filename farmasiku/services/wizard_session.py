# farmasiku/services/wizard_session.py
from __future__ import annotations

import logging
import uuid
from typing import Any, Callable, Dict, Optional, Tuple

from farmasiku.persistence import PersistenceError, PersistenceService
from farmasiku.wizard import actions as a
from farmasiku.wizard.effects import (
    CreateOrder,
    CreateSession,
    Effect,
    SaveAssessment,
    UpdateSession,
    is_blocking,
)
from farmasiku.wizard.machine import Transition, WizardMachine
from farmasiku.wizard.state import WizardState

logger = logging.getLogger(__name__)

# Hook used to run best-effort effects later, e.g. BackgroundTasks.add_task
Defer = Callable[..., None]


class WizardSessionService:
    """
    Service that coordinates:
      - keeping the live state of every running wizard
      - driving the WizardMachine
      - performing the effects it asks for against the persistence service

    Session updates and assessment logging are best-effort: failures are
    logged and never change the wizard. Session creation and order creation
    are performed inline and their outcome is fed back to the machine.
    """

    def __init__(
        self,
        persistence: PersistenceService,
        machine: Optional[WizardMachine] = None,
    ):
        self.persistence = persistence
        self.machine = machine or WizardMachine()
        self._states: Dict[str, WizardState] = {}
        self._metadata: Dict[str, Dict[str, Any]] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def start(
        self,
        metadata: Optional[Dict[str, Any]] = None,
        defer: Optional[Defer] = None,
    ) -> Tuple[str, WizardState]:
        """
        Start a new wizard.

        Returns:
          - wizard id (key for later dispatch calls)
          - initial state, with a session id if one could be created
        """
        wizard_id = str(uuid.uuid4())
        self._metadata[wizard_id] = dict(metadata or {})

        state = self._apply(wizard_id, self.machine.start(), defer)
        self._states[wizard_id] = state
        return wizard_id, state

    def get_state(self, wizard_id: str) -> Optional[WizardState]:
        return self._states.get(wizard_id)

    def dispatch(
        self,
        wizard_id: str,
        action: a.Action,
        defer: Optional[Defer] = None,
    ) -> WizardState:
        """
        Apply a user action to a running wizard and perform its effects.

        Raises KeyError for an unknown wizard id and lets
        InvalidTransitionError through for actions illegal at this step.
        """
        state = self._states[wizard_id]
        state = self._apply(wizard_id, self.machine.transition(state, action), defer)
        self._states[wizard_id] = state
        return state

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _apply(self, wizard_id: str, result: Transition, defer: Optional[Defer]) -> WizardState:
        state = result.state
        for effect in result.effects:
            feedback = self._perform(wizard_id, effect, defer)
            if feedback is not None:
                state = self._apply(wizard_id, self.machine.transition(state, feedback), defer)
        return state

    def _perform(
        self,
        wizard_id: str,
        effect: Effect,
        defer: Optional[Defer],
    ) -> Optional[a.Action]:
        if is_blocking(effect):
            if isinstance(effect, CreateSession):
                return self._create_session(wizard_id, effect)
            return self._create_order(effect)

        if defer is not None:
            defer(self.run_best_effort, effect)
        else:
            self.run_best_effort(effect)
        return None

    def _create_session(self, wizard_id: str, effect: CreateSession) -> Optional[a.Action]:
        metadata = {**self._metadata.get(wizard_id, {}), **effect.metadata}
        try:
            session_id = self.persistence.create_session(metadata)
        except PersistenceError as exc:
            # The run goes on without a session id
            logger.warning("Failed to create user session: %s", exc)
            return None

        logger.info("User session created: %s", session_id)
        return a.SessionStarted(session_id=session_id)

    def _create_order(self, effect: CreateOrder) -> a.Action:
        try:
            order_id = self.persistence.create_order(effect.order)
        except PersistenceError as exc:
            logger.error("Failed to create order: %s", exc)
            return a.OrderFailed()

        logger.info("Order created: %s", order_id)
        return a.OrderCreated(order_id=order_id)

    def run_best_effort(self, effect: Effect) -> None:
        """
        Perform a session update or assessment save, logging any failure.
        """
        try:
            if isinstance(effect, UpdateSession):
                self.persistence.update_session(effect.session_id, effect.fields)
            elif isinstance(effect, SaveAssessment):
                self.persistence.save_assessment(effect.record)
            else:
                raise TypeError(f"Not a best-effort effect: {type(effect).__name__}")
        except PersistenceError as exc:
            logger.warning("Failed to persist %s: %s", type(effect).__name__, exc)
