# farmasiku/wizard/errors.py


class WizardValidationError(ValueError):
    """
    User input that cannot be accepted at this point (empty selection,
    unknown ids...). The message is meant to be shown to the user as-is.
    """


class InvalidTransitionError(RuntimeError):
    """
    The action is not legal at the current step.
    """

    def __init__(self, step, action_type: str):
        self.step = step
        self.action_type = action_type
        super().__init__(f"Action '{action_type}' is not allowed at step '{step.value}'")
