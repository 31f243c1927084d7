"""Counting and listing helpers for classified triggered alarm collections."""

from collections import Counter
from typing import Iterable

from ncs_alarms.exceptions import AlarmNotFoundError
from ncs_alarms.models.alarms import TriggeredAlarm


def _sorted_fold(values: Iterable[str]) -> list[str]:
    return sorted(values, key=str.lower)


def count_excluded(alarms: Iterable[TriggeredAlarm]) -> int:
    """Number of alarms excluded implicitly or explicitly."""
    return sum(1 for a in alarms if a.excluded)


def count_excluded_final(alarms: Iterable[TriggeredAlarm]) -> int:
    """Number of alarms explicitly excluded from evaluation."""
    return sum(1 for a in alarms if a.explicitly_excluded)


def count_evaluated(alarms: Iterable[TriggeredAlarm]) -> int:
    return sum(1 for a in alarms if not a.excluded)


def keys(alarms: Iterable[TriggeredAlarm], evaluate_acknowledged: bool, include_excluded: bool) -> list[str]:
    """
    Return alarm keys in ascending, case-insensitive order.

    Acknowledged alarms are skipped unless *evaluate_acknowledged*; excluded
    alarms are skipped unless *include_excluded*.
    """
    selected = []
    for a in alarms:
        if a.acknowledged and not evaluate_acknowledged:
            continue
        if a.excluded and not include_excluded:
            continue
        selected.append(a.key)
    return _sorted_fold(selected)


def keys_excluded(alarms: Iterable[TriggeredAlarm]) -> list[str]:
    return _sorted_fold(a.key for a in alarms if a.excluded)


def filter_by_key(alarms: Iterable[TriggeredAlarm], key: str) -> TriggeredAlarm:
    for a in alarms:
        if a.key == key:
            return a
    raise AlarmNotFoundError(key)


def count_per_datacenter(alarms: Iterable[TriggeredAlarm]) -> dict[str, int]:
    return dict(Counter(a.datacenter for a in alarms))


def datacenters(alarms: Iterable[TriggeredAlarm]) -> list[str]:
    return _sorted_fold({a.datacenter for a in alarms if a.datacenter})


def exclusion_reasons(alarms: Iterable[TriggeredAlarm]) -> dict[str, int]:
    """Tally excluded alarms by the dimension that excluded them."""
    return dict(Counter(a.exclusion_reason for a in alarms if a.excluded and a.exclusion_reason))
