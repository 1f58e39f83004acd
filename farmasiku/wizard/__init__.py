from .steps import WizardStep, StepInfo, PREDECESSORS, get_step_info, has_back
from .schema import Assessment, PaymentInfo
from .state import WizardState
from .errors import WizardValidationError, InvalidTransitionError
from .machine import WizardMachine, Transition, transition

__all__ = [
    "WizardStep",
    "StepInfo",
    "PREDECESSORS",
    "get_step_info",
    "has_back",
    "Assessment",
    "PaymentInfo",
    "WizardState",
    "WizardValidationError",
    "InvalidTransitionError",
    "WizardMachine",
    "Transition",
    "transition",
]
