# farmasiku/wizard/danger.py
from __future__ import annotations

from typing import AbstractSet, Iterable, Tuple


def dangerous_selected(
    selected: Iterable[str],
    danger_set: AbstractSet[str],
) -> Tuple[str, ...]:
    """
    Selected symptoms that are in the danger set, in selection order.
    """
    return tuple(s for s in selected if s in danger_set)


def needs_danger_warning(
    selected: Iterable[str],
    danger_set: AbstractSet[str],
    acknowledged: AbstractSet[str],
) -> bool:
    """
    True when the selection holds a danger symptom the user has not yet
    continued past.
    """
    return any(s not in acknowledged for s in dangerous_selected(selected, danger_set))
