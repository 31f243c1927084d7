"""Severity evaluation over classified triggered alarms."""

import logging
from typing import Iterable

from ncs_alarms.models.alarms import TriggeredAlarm
from ncs_alarms.primitives import STATUS_GRAY, STATUS_GREEN, STATUS_RED, STATUS_YELLOW, State

logger = logging.getLogger(__name__)

_STATUS_STATES = {
    STATUS_GREEN: State.OK,
    STATUS_YELLOW: State.WARNING,
    STATUS_RED: State.CRITICAL,
    STATUS_GRAY: State.UNKNOWN,
}


def status_to_state(status: str) -> State:
    """
    Convert a ManagedEntityStatus (green, yellow, red, gray) to a plugin
    state. Anything else is treated as the worst case.
    """
    state = _STATUS_STATES.get(str(status or "").lower())
    if state is None:
        logger.warning("unknown entity status %r provided, assuming worst case", status)
        return State.CRITICAL
    return state


def _evaluated(alarms: Iterable[TriggeredAlarm], evaluate_excluded: bool) -> list[TriggeredAlarm]:
    return [a for a in alarms if evaluate_excluded or not a.excluded]


def _count(alarms: Iterable[TriggeredAlarm], state: State, evaluate_excluded: bool) -> int:
    return sum(1 for a in _evaluated(alarms, evaluate_excluded) if status_to_state(a.status) is state)


def has_critical(alarms: Iterable[TriggeredAlarm], evaluate_excluded: bool = False) -> bool:
    return _count(alarms, State.CRITICAL, evaluate_excluded) > 0


def has_warning(alarms: Iterable[TriggeredAlarm], evaluate_excluded: bool = False) -> bool:
    return _count(alarms, State.WARNING, evaluate_excluded) > 0


def has_unknown(alarms: Iterable[TriggeredAlarm], evaluate_excluded: bool = False) -> bool:
    return _count(alarms, State.UNKNOWN, evaluate_excluded) > 0


def num_critical(alarms: Iterable[TriggeredAlarm], evaluate_excluded: bool = False) -> int:
    return _count(alarms, State.CRITICAL, evaluate_excluded)


def num_warning(alarms: Iterable[TriggeredAlarm], evaluate_excluded: bool = False) -> int:
    return _count(alarms, State.WARNING, evaluate_excluded)


def num_unknown(alarms: Iterable[TriggeredAlarm], evaluate_excluded: bool = False) -> int:
    return _count(alarms, State.UNKNOWN, evaluate_excluded)


def num_ok(alarms: Iterable[TriggeredAlarm], evaluate_excluded: bool = False) -> int:
    return _count(alarms, State.OK, evaluate_excluded)


def overall_state(alarms: Iterable[TriggeredAlarm], evaluate_excluded: bool = False) -> State:
    """
    Return the single most severe state among evaluated alarms.

    Critical takes precedence over warning, warning over unknown. No
    evaluated alarms (or only green ones) is OK.
    """
    evaluated = _evaluated(alarms, evaluate_excluded)
    if has_critical(evaluated, True):
        return State.CRITICAL
    if has_warning(evaluated, True):
        return State.WARNING
    if has_unknown(evaluated, True):
        return State.UNKNOWN
    return State.OK


def is_ok(alarms: Iterable[TriggeredAlarm], evaluate_excluded: bool = False) -> bool:
    return overall_state(alarms, evaluate_excluded) is State.OK
