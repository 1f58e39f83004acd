# farmasiku/wizard/steps.py
from enum import Enum
from typing import Dict, NamedTuple


class WizardStep(str, Enum):
    AGE = "age"
    BODY_PART = "body_part"
    SYMPTOM = "symptom"
    ASSESSMENT = "assessment"
    CONFIRMATION = "confirmation"
    MEDICATION = "medication"
    PAYMENT = "payment"
    CONSULTATION = "consultation"
    SUCCESS = "success"


# Where "back" leads from each step. Steps missing here have no back button.
PREDECESSORS: Dict[WizardStep, WizardStep] = {
    WizardStep.BODY_PART: WizardStep.AGE,
    WizardStep.SYMPTOM: WizardStep.BODY_PART,
    WizardStep.ASSESSMENT: WizardStep.SYMPTOM,
    WizardStep.CONFIRMATION: WizardStep.SYMPTOM,
    WizardStep.MEDICATION: WizardStep.CONFIRMATION,
    WizardStep.PAYMENT: WizardStep.MEDICATION,
    # Back to symptom instead when consultation came from the danger overlay
    WizardStep.CONSULTATION: WizardStep.CONFIRMATION,
}


class StepInfo(NamedTuple):
    number: int
    total: int
    name: str


TOTAL_STEPS = 7

STEP_INFO: Dict[WizardStep, StepInfo] = {
    WizardStep.AGE: StepInfo(1, TOTAL_STEPS, "Your age"),
    WizardStep.BODY_PART: StepInfo(2, TOTAL_STEPS, "Body part"),
    WizardStep.SYMPTOM: StepInfo(3, TOTAL_STEPS, "Symptoms"),
    WizardStep.ASSESSMENT: StepInfo(3, TOTAL_STEPS, "Symptom details"),
    WizardStep.CONFIRMATION: StepInfo(4, TOTAL_STEPS, "Confirm symptoms"),
    WizardStep.MEDICATION: StepInfo(5, TOTAL_STEPS, "Recommended medication"),
    WizardStep.CONSULTATION: StepInfo(5, TOTAL_STEPS, "See a pharmacist"),
    WizardStep.PAYMENT: StepInfo(6, TOTAL_STEPS, "Payment"),
    WizardStep.SUCCESS: StepInfo(7, TOTAL_STEPS, "Order placed"),
}


def get_step_info(step: WizardStep) -> StepInfo:
    return STEP_INFO[step]


def has_back(step: WizardStep) -> bool:
    return step in PREDECESSORS
