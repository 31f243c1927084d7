"""Pydantic models for triggered alarms and their classification outcome."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from ncs_alarms.primitives import STATUS_GRAY

# Managed object types that are never members of a resource pool.
NON_POOL_KINDS = frozenset(
    {
        "clustercomputeresource",
        "computeresource",
        "datacenter",
        "datastore",
        "distributedvirtualportgroup",
        "folder",
        "hostsystem",
        "network",
        "storagepod",
        "vmwaredistributedvirtualswitch",
    }
)


def _normalize_status(value: Any) -> str:
    status = str(value or "").strip().lower()
    return status or STATUS_GRAY


class AlarmEntity(BaseModel):
    """The inventory object (host, datastore, VM, ...) an alarm is raised against."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str
    kind: str
    moid: str = ""
    resource_pools: tuple[str, ...] = ()
    status: str = STATUS_GRAY

    @field_validator("status", mode="before")
    @classmethod
    def _status_lower(cls, value: Any) -> str:
        return _normalize_status(value)

    @model_validator(mode="after")
    def _pools_only_for_pool_members(self) -> "AlarmEntity":
        if self.resource_pools and self.kind.lower() in NON_POOL_KINDS:
            raise ValueError(f"{self.kind} entities cannot belong to resource pools")
        return self


class TriggeredAlarm(BaseModel):
    """
    One raised alarm state along with the entity it is attached to.

    Records are immutable. The classification fields (``excluded``,
    ``explicitly_included``, ``explicitly_excluded``, ``exclusion_reason``)
    are only ever populated on the copies returned by
    :func:`ncs_alarms.filtering.classify`.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    # Unique identifier for the alarm state (not the alarm definition).
    key: str
    name: str
    description: str = ""
    entity: AlarmEntity
    status: str = STATUS_GRAY
    time: datetime | None = None
    acknowledged: bool = False
    acknowledged_time: datetime | None = None
    acknowledged_by: str = ""
    datacenter: str = ""
    definition_moid: str = ""

    excluded: bool = False
    explicitly_included: bool = False
    explicitly_excluded: bool = False
    exclusion_reason: str = ""

    @field_validator("status", mode="before")
    @classmethod
    def _status_lower(cls, value: Any) -> str:
        return _normalize_status(value)

    @model_validator(mode="before")
    @classmethod
    def _drop_stale_acknowledgement(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("acknowledged"):
            data = {**data, "acknowledged_time": None, "acknowledged_by": ""}
        return data

    @property
    def entity_label(self) -> str:
        return f"{self.entity.name} (type {self.entity.kind})"


class Dimension(str, Enum):
    """Filter dimensions, valued by the reason shown when they exclude an alarm."""

    ENTITY_TYPE = "object type"
    ENTITY_NAME = "object name"
    RESOURCE_POOL = "resource pool"
    ALARM_NAME = "alarm name"
    ALARM_DESCRIPTION = "alarm desc"
    ALARM_STATUS = "alarm status"
    ACKNOWLEDGED = "alarm is acknowledged"


class Outcome(str, Enum):
    KEPT = "kept"
    EXCLUDED_EXPLICIT = "excluded_explicit"
    EXCLUDED_IMPLICIT = "excluded_implicit"


class Classification(BaseModel):
    """Result of running one alarm through the filter pipeline."""

    model_config = ConfigDict(frozen=True)

    outcome: Outcome = Outcome.KEPT
    # Dimension responsible for the exclusion; None when kept.
    dimension: Dimension | None = None
    explicitly_included: bool = False

    @property
    def excluded(self) -> bool:
        return self.outcome is not Outcome.KEPT

    @property
    def explicitly_excluded(self) -> bool:
        return self.outcome is Outcome.EXCLUDED_EXPLICIT

    def apply(self, alarm: TriggeredAlarm) -> TriggeredAlarm:
        """Return a copy of *alarm* carrying this classification."""
        return alarm.model_copy(
            update={
                "excluded": self.excluded,
                "explicitly_included": self.explicitly_included,
                "explicitly_excluded": self.explicitly_excluded,
                "exclusion_reason": self.dimension.value if self.dimension else "",
            }
        )
