from .wizard_session import WizardSessionService

__all__ = ["WizardSessionService"]
