"""
Upload item state machine.

Legal moves:
    PENDING -> IN_PROGRESS -> DONE
    PENDING | IN_PROGRESS -> FAILED

DONE and FAILED are terminal. plan_transition only decides; persistence
applies the plan as a conditional update keyed on the observed status.

Dependencies: upload_tracker.core.statuses
System role: Pure transition rules for a single item
"""

import enum
from dataclasses import dataclass

from upload_tracker.core.statuses import ItemStatus


class ItemAction(str, enum.Enum):
    """Client-reported item events."""

    BEGIN = "begin"
    COMPLETE = "complete"
    FAIL = "fail"


_SOURCES: dict[ItemAction, frozenset[ItemStatus]] = {
    ItemAction.BEGIN: frozenset({ItemStatus.PENDING}),
    ItemAction.COMPLETE: frozenset({ItemStatus.IN_PROGRESS}),
    ItemAction.FAIL: frozenset({ItemStatus.PENDING, ItemStatus.IN_PROGRESS}),
}

_TARGETS: dict[ItemAction, ItemStatus] = {
    ItemAction.BEGIN: ItemStatus.IN_PROGRESS,
    ItemAction.COMPLETE: ItemStatus.DONE,
    ItemAction.FAIL: ItemStatus.FAILED,
}


@dataclass(frozen=True)
class TransitionPlan:
    """A legal move for one item, valid only while the item is still in from_status."""

    action: ItemAction
    from_status: ItemStatus
    to_status: ItemStatus

    @property
    def sets_started_at(self) -> bool:
        return self.to_status is ItemStatus.IN_PROGRESS

    @property
    def sets_ended_at(self) -> bool:
        return self.to_status.is_terminal


@dataclass(frozen=True)
class InvalidTransition:
    """The action is not allowed from the item's current status."""

    action: ItemAction
    current_status: ItemStatus

    @property
    def message(self) -> str:
        return f"Cannot {self.action.value} an item that is {self.current_status.value}"


def plan_transition(current: ItemStatus, action: ItemAction) -> TransitionPlan | InvalidTransition:
    """
    Decide what an action does to an item observed in ``current``.

    Args:
        current: Status last read for the item
        action: Requested event

    Returns:
        TransitionPlan when legal, InvalidTransition otherwise
    """
    if current not in _SOURCES[action]:
        return InvalidTransition(action=action, current_status=current)
    return TransitionPlan(action=action, from_status=current, to_status=_TARGETS[action])
