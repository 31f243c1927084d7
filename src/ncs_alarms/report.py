"""Plugin output: one-line summary and long service output."""

from __future__ import annotations

import functools
from pathlib import Path
from typing import Sequence

from jinja2 import Environment, FileSystemLoader

from ncs_alarms import queries, severity
from ncs_alarms.models.alarms import TriggeredAlarm
from ncs_alarms.models.config import FilterCriteria
from ncs_alarms.primitives import State

CRITICAL_THRESHOLD = "One or more non-excluded alarms with a red status"
WARNING_THRESHOLD = "One or more non-excluded alarms with a yellow status"

# (label, include field, exclude field) in the order shown in the report
_CRITERIA_ROWS = (
    ("entity types", "include_entity_types", "exclude_entity_types"),
    ("entity names", "include_entity_names", "exclude_entity_names"),
    ("entity resource pools", "include_entity_resource_pools", "exclude_entity_resource_pools"),
    ("names", "include_alarm_names", "exclude_alarm_names"),
    ("descriptions", "include_alarm_descriptions", "exclude_alarm_descriptions"),
    ("statuses", "include_alarm_statuses", "exclude_alarm_statuses"),
)


@functools.lru_cache(maxsize=1)
def get_jinja_env() -> Environment:
    """Return a cached Jinja2 Environment for the plain-text templates."""
    template_dir = Path(__file__).parent / "templates"
    return Environment(
        loader=FileSystemLoader(template_dir),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def one_line_summary(state: State, alarms: Sequence[TriggeredAlarm], datacenters_evaluated: Sequence[str]) -> str:
    """The summary line shown most prominently in notifications."""
    evaluated = queries.count_evaluated(alarms)
    if not severity.is_ok(alarms):
        return (
            f"{state.label}: {evaluated} non-excluded Triggered Alarms detected "
            f"(evaluated {len(datacenters_evaluated)} Datacenters, {len(alarms)} Triggered Alarms)"
        )
    return (
        f"{state.label}: No non-excluded Triggered Alarms detected "
        f"(evaluated {len(datacenters_evaluated)} Datacenters, {len(alarms)} Triggered Alarms)"
    )


def criteria_rows(criteria: FilterCriteria) -> list[dict[str, object]]:
    rows = []
    for label, include_field, exclude_field in _CRITERIA_ROWS:
        rows.append({"label": label, "action": "include", "values": list(getattr(criteria, include_field))})
        rows.append({"label": label, "action": "exclude", "values": list(getattr(criteria, exclude_field))})
    return rows


def alarms_report(
    alarms: Sequence[TriggeredAlarm],
    criteria: FilterCriteria,
    server: str,
    datacenters_specified: Sequence[str],
    datacenters_evaluated: Sequence[str],
) -> str:
    """Detailed listing of evaluated and excluded alarms plus the active filters."""
    tpl = get_jinja_env().get_template("alarms_report.txt.j2")
    return tpl.render(
        evaluated=[a for a in alarms if not a.excluded],
        excluded=[a for a in alarms if a.excluded],
        criteria=criteria,
        criteria_rows=criteria_rows(criteria),
        server=server,
        total=len(alarms),
        num_excluded=queries.count_excluded(alarms),
        datacenters_specified=list(datacenters_specified),
        datacenters_evaluated=list(datacenters_evaluated),
    )
