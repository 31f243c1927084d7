"""Multi-dimension include/exclude filtering of triggered alarms.

Each alarm is run through the dimensions below, in order. For every
dimension with a non-empty list:

* a match against the exclude list explicitly (and permanently) excludes the
  alarm; later dimensions cannot bring it back,
* otherwise the alarm must match the include list. A match marks it as
  explicitly included, a miss implicitly excludes it.

An alarm survives only when it is never explicitly excluded and matches the
include list of every dimension that has one. Last of all, acknowledged
alarms are explicitly excluded unless acknowledged alarms are evaluated;
this also overrides an explicit inclusion.

Classification is a pure function of alarm and criteria. ``classify`` returns
new records and never modifies the collection it is given.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Callable, Iterable, NamedTuple

from ncs_alarms.models.alarms import Classification, Dimension, Outcome, TriggeredAlarm
from ncs_alarms.models.config import FilterCriteria
from ncs_alarms.primitives import canonical_status, contains_fold, equal_fold, in_list

logger = logging.getLogger(__name__)

Matcher = Callable[[TriggeredAlarm, str], bool]


def _match_entity_type(alarm: TriggeredAlarm, keyword: str) -> bool:
    return equal_fold(alarm.entity.kind, keyword)


def _match_entity_name(alarm: TriggeredAlarm, substr: str) -> bool:
    return contains_fold(alarm.entity.name, substr)


def _match_resource_pool(alarm: TriggeredAlarm, pool: str) -> bool:
    return in_list(pool, alarm.entity.resource_pools)


def _match_alarm_name(alarm: TriggeredAlarm, substr: str) -> bool:
    return contains_fold(alarm.name, substr)


def _match_alarm_description(alarm: TriggeredAlarm, substr: str) -> bool:
    return contains_fold(alarm.description, substr)


def _match_alarm_status(alarm: TriggeredAlarm, keyword: str) -> bool:
    # Unrecognised keywords map to None and never match.
    return canonical_status(keyword) == alarm.status


class Stage(NamedTuple):
    dimension: Dimension
    include: tuple[str, ...]
    exclude: tuple[str, ...]
    matches: Matcher

    @property
    def active(self) -> bool:
        return bool(self.include or self.exclude)

    def matches_any(self, alarm: TriggeredAlarm, values: Iterable[str]) -> bool:
        return any(self.matches(alarm, v) for v in values)


def stages(criteria: FilterCriteria) -> list[Stage]:
    """Return the per-dimension stages in evaluation order."""
    return [
        Stage(Dimension.ENTITY_TYPE, criteria.include_entity_types, criteria.exclude_entity_types, _match_entity_type),
        Stage(Dimension.ENTITY_NAME, criteria.include_entity_names, criteria.exclude_entity_names, _match_entity_name),
        Stage(
            Dimension.RESOURCE_POOL,
            criteria.include_entity_resource_pools,
            criteria.exclude_entity_resource_pools,
            _match_resource_pool,
        ),
        Stage(Dimension.ALARM_NAME, criteria.include_alarm_names, criteria.exclude_alarm_names, _match_alarm_name),
        Stage(
            Dimension.ALARM_DESCRIPTION,
            criteria.include_alarm_descriptions,
            criteria.exclude_alarm_descriptions,
            _match_alarm_description,
        ),
        Stage(Dimension.ALARM_STATUS, criteria.include_alarm_statuses, criteria.exclude_alarm_statuses, _match_alarm_status),
    ]


def evaluate(alarm: TriggeredAlarm, criteria: FilterCriteria) -> Classification:
    """Classify a single alarm against *criteria*."""
    explicitly_included = False
    implicit: Dimension | None = None

    for stage in stages(criteria):
        if not stage.active:
            continue

        if stage.exclude and stage.matches_any(alarm, stage.exclude):
            return Classification(
                outcome=Outcome.EXCLUDED_EXPLICIT,
                dimension=stage.dimension,
                explicitly_included=explicitly_included,
            )

        if stage.include:
            if stage.matches_any(alarm, stage.include):
                explicitly_included = True
            elif implicit is None:
                implicit = stage.dimension

    if alarm.acknowledged and not criteria.evaluate_acknowledged:
        return Classification(
            outcome=Outcome.EXCLUDED_EXPLICIT,
            dimension=Dimension.ACKNOWLEDGED,
            explicitly_included=explicitly_included,
        )

    if implicit is not None:
        return Classification(
            outcome=Outcome.EXCLUDED_IMPLICIT,
            dimension=implicit,
            explicitly_included=explicitly_included,
        )

    return Classification(explicitly_included=explicitly_included)


def _log_marked(alarm: TriggeredAlarm, result: Classification) -> None:
    if result.excluded:
        logger.debug(
            "Alarm (%s) for %r of type %r with name %r %s marked for exclusion (%s)",
            alarm.status,
            alarm.entity.name,
            alarm.entity.kind,
            alarm.name,
            "explicitly" if result.explicitly_excluded else "implicitly",
            result.dimension.value if result.dimension else "",
        )
    else:
        logger.debug(
            "Alarm (%s) for %r of type %r with name %r %s marked for inclusion",
            alarm.status,
            alarm.entity.name,
            alarm.entity.kind,
            alarm.name,
            "explicitly" if result.explicitly_included else "implicitly",
        )


def classify(alarms: Iterable[TriggeredAlarm], criteria: FilterCriteria) -> list[TriggeredAlarm]:
    """
    Return copies of *alarms* with the classification fields populated.

    Order is preserved and nothing is dropped; excluded alarms are only
    flagged so reports can explain why they did not count.
    """
    active = [s.dimension.value for s in stages(criteria) if s.active]
    logger.debug(
        "Filtering triggered alarms (active dimensions: %s, evaluate acknowledged: %s)",
        ", ".join(active) or "none",
        criteria.evaluate_acknowledged,
    )

    classified: list[TriggeredAlarm] = []
    reasons: Counter[str] = Counter()
    for alarm in alarms:
        result = evaluate(alarm, criteria)
        _log_marked(alarm, result)
        if result.dimension is not None:
            reasons[result.dimension.value] += 1
        classified.append(result.apply(alarm))

    excluded = sum(reasons.values())
    logger.info(
        "Filtering complete: %d of %d triggered alarms excluded %s",
        excluded,
        len(classified),
        dict(reasons) if reasons else "",
    )
    return classified
