# farmasiku/wizard/actions.py
"""
Everything that can happen to a wizard.

User actions come from the screens; the `SessionStarted`, `OrderCreated`
and `OrderFailed` actions are fed back by the driver once the matching
effect has been performed.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from farmasiku.wizard.schema import Assessment, PaymentInfo


@dataclass(frozen=True)
class SubmitAge:
    age: int


@dataclass(frozen=True)
class ChooseBodyPart:
    body_part: str


@dataclass(frozen=True)
class ToggleSymptom:
    symptom: str


@dataclass(frozen=True)
class RequestMoreSymptoms:
    pass


@dataclass(frozen=True)
class StartAssessment:
    symptom: str


@dataclass(frozen=True)
class CompleteSelection:
    pass


@dataclass(frozen=True)
class DangerGoToConsultation:
    pass


@dataclass(frozen=True)
class DangerContinue:
    pass


@dataclass(frozen=True)
class SubmitAssessment:
    assessment: Assessment


@dataclass(frozen=True)
class ConfirmSymptoms:
    is_more_severe: bool


@dataclass(frozen=True)
class ChooseMedications:
    medication_ids: Tuple[str, ...]


@dataclass(frozen=True)
class SubmitPayment:
    payment: PaymentInfo


@dataclass(frozen=True)
class Back:
    pass


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class SessionStarted:
    session_id: str


@dataclass(frozen=True)
class OrderCreated:
    order_id: str


@dataclass(frozen=True)
class OrderFailed:
    message: str = "Failed to process order. Please try again."


Action = Union[
    SubmitAge,
    ChooseBodyPart,
    ToggleSymptom,
    RequestMoreSymptoms,
    StartAssessment,
    CompleteSelection,
    DangerGoToConsultation,
    DangerContinue,
    SubmitAssessment,
    ConfirmSymptoms,
    ChooseMedications,
    SubmitPayment,
    Back,
    Reset,
    SessionStarted,
    OrderCreated,
    OrderFailed,
]
