# farmasiku/wizard/effects.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Union


@dataclass(frozen=True)
class CreateSession:
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class UpdateSession:
    session_id: str
    fields: Dict[str, Any]


@dataclass(frozen=True)
class SaveAssessment:
    record: Dict[str, Any]


@dataclass(frozen=True)
class CreateOrder:
    order: Dict[str, Any]


Effect = Union[CreateSession, UpdateSession, SaveAssessment, CreateOrder]


def is_blocking(effect: Effect) -> bool:
    """
    Blocking effects must complete before the wizard can go on, and their
    outcome is fed back as an action. Everything else is best-effort.
    """
    return isinstance(effect, (CreateSession, CreateOrder))
