"""
Tests for the wizard session service (effect driver).
"""

import logging

import pytest

from farmasiku.services import WizardSessionService
from farmasiku.wizard import actions as a
from farmasiku.wizard.effects import SaveAssessment, UpdateSession
from farmasiku.wizard.errors import InvalidTransitionError
from farmasiku.wizard.schema import Assessment
from farmasiku.wizard.state import WizardState
from farmasiku.wizard.steps import WizardStep


@pytest.fixture
def service(fake_persistence, machine):
    return WizardSessionService(persistence=fake_persistence, machine=machine)


def _to_payment(service, wizard_id):
    for action in (
        a.SubmitAge(age=30),
        a.ChooseBodyPart(body_part="head"),
        a.ToggleSymptom("headache"),
        a.CompleteSelection(),
        a.SubmitAssessment(Assessment(symptom="headache", severity="mild")),
        a.CompleteSelection(),
        a.ConfirmSymptoms(is_more_severe=False),
        a.ChooseMedications(medication_ids=("paracetamol-500",)),
    ):
        state = service.dispatch(wizard_id, action)
    return state


def test_start_creates_session_with_metadata(service, fake_persistence):
    wizard_id, state = service.start({"userAgent": "pytest", "platform": "linux"})

    assert state.step == WizardStep.AGE
    assert state.session_id == "session-1"
    assert fake_persistence.sessions["session-1"]["userAgent"] == "pytest"
    assert "startedAt" in fake_persistence.sessions["session-1"]
    assert service.get_state(wizard_id) == state


def test_session_failure_leaves_session_id_empty(service, fake_persistence, caplog):
    fake_persistence.fail_sessions = True

    with caplog.at_level(logging.WARNING):
        wizard_id, state = service.start()

    assert state.session_id is None
    assert "Failed to create user session" in caplog.text

    # The wizard still works, it just never updates a session
    state = service.dispatch(wizard_id, a.SubmitAge(age=30))
    assert state.step == WizardStep.BODY_PART
    assert fake_persistence.sessions == {}


def test_session_updates_are_persisted(service, fake_persistence):
    wizard_id, _ = service.start()

    service.dispatch(wizard_id, a.SubmitAge(age=30))
    service.dispatch(wizard_id, a.ChooseBodyPart(body_part="head"))

    session = fake_persistence.sessions["session-1"]
    assert session["userAge"] == 30
    assert session["selectedBodyPart"] == "head"


def test_best_effort_failures_do_not_change_state(service, fake_persistence, caplog):
    wizard_id, _ = service.start()
    fake_persistence.fail_writes = True

    with caplog.at_level(logging.WARNING):
        state = service.dispatch(wizard_id, a.SubmitAge(age=30))
        state = service.dispatch(wizard_id, a.ChooseBodyPart(body_part="head"))
        state = service.dispatch(wizard_id, a.ToggleSymptom("headache"))
        state = service.dispatch(wizard_id, a.StartAssessment("headache"))
        state = service.dispatch(wizard_id, a.SubmitAssessment(Assessment(symptom="headache")))

    assert state.step == WizardStep.SYMPTOM
    assert "headache" in state.symptom_assessments
    assert state.error is None
    assert fake_persistence.assessments == []
    assert "Failed to persist SaveAssessment" in caplog.text


def test_deferred_effects_run_later(service, fake_persistence):
    wizard_id, _ = service.start()
    deferred = []

    service.dispatch(wizard_id, a.SubmitAge(age=30), defer=lambda fn, *args: deferred.append((fn, args)))

    assert "userAge" not in fake_persistence.sessions["session-1"]
    assert len(deferred) == 1
    fn, args = deferred[0]
    assert args == (UpdateSession(session_id="session-1", fields={"userAge": 30}),)

    fn(*args)
    assert fake_persistence.sessions["session-1"]["userAge"] == 30


def test_assessment_saved_with_session_id(service, fake_persistence):
    wizard_id, _ = service.start()
    _to_payment(service, wizard_id)

    (record,) = fake_persistence.assessments
    assert record["sessionId"] == "session-1"
    assert record["symptom"] == "headache"
    assert record["bodyPart"] == "head"


def test_payment_success(service, fake_persistence, payment):
    wizard_id, _ = service.start()
    _to_payment(service, wizard_id)

    state = service.dispatch(wizard_id, a.SubmitPayment(payment))

    assert state.step == WizardStep.SUCCESS
    assert state.last_order_id == "order-3"
    order = fake_persistence.orders["order-3"]
    assert order["totalAmount"] == 8.50
    assert [m["id"] for m in order["medications"]] == ["paracetamol-500"]


def test_payment_failure_keeps_payment_step(service, fake_persistence, payment, caplog):
    wizard_id, _ = service.start()
    _to_payment(service, wizard_id)
    fake_persistence.fail_orders = True

    with caplog.at_level(logging.ERROR):
        state = service.dispatch(wizard_id, a.SubmitPayment(payment))

    assert state.step == WizardStep.PAYMENT
    assert state.error == "Failed to process order. Please try again."
    assert state.last_order_id is None
    assert "Failed to create order" in caplog.text

    # Resubmitting once the store is back completes the order
    fake_persistence.fail_orders = False
    state = service.dispatch(wizard_id, a.SubmitPayment(payment))
    assert state.step == WizardStep.SUCCESS
    assert state.error is None


def test_reset_starts_new_session(service, fake_persistence, payment):
    wizard_id, _ = service.start({"platform": "web"})
    _to_payment(service, wizard_id)
    state = service.dispatch(wizard_id, a.SubmitPayment(payment))
    assert state.step == WizardStep.SUCCESS

    state = service.dispatch(wizard_id, a.Reset())

    assert state.step == WizardStep.AGE
    assert state.session_id is not None
    assert state.session_id != "session-1"
    assert fake_persistence.sessions[state.session_id]["platform"] == "web"
    assert state == WizardState(session_id=state.session_id)


def test_invalid_action_propagates(service):
    wizard_id, state = service.start()

    with pytest.raises(InvalidTransitionError):
        service.dispatch(wizard_id, a.Reset())

    assert service.get_state(wizard_id) == state


def test_unknown_wizard(service):
    with pytest.raises(KeyError):
        service.dispatch("missing", a.Back())
    assert service.get_state("missing") is None


def test_run_best_effort_rejects_blocking_effects(service):
    from farmasiku.wizard.effects import CreateOrder

    with pytest.raises(TypeError):
        service.run_best_effort(CreateOrder(order={}))


def test_save_assessment_effect(service, fake_persistence):
    service.run_best_effort(SaveAssessment(record={"symptom": "fever"}))

    assert fake_persistence.assessments == [{"symptom": "fever"}]
