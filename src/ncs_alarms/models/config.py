"""Pydantic models for filter criteria and plugin configuration."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ncs_alarms.primitives import dedupe_fold, split_csv

LOG_LEVELS = ("disabled", "panic", "fatal", "error", "warn", "info", "debug", "trace")

_LIST_FIELDS = (
    "include_entity_types",
    "exclude_entity_types",
    "include_entity_names",
    "exclude_entity_names",
    "include_entity_resource_pools",
    "exclude_entity_resource_pools",
    "include_alarm_names",
    "exclude_alarm_names",
    "include_alarm_descriptions",
    "exclude_alarm_descriptions",
    "include_alarm_statuses",
    "exclude_alarm_statuses",
)


class FilterCriteria(BaseModel):
    """
    Operator-supplied include/exclude lists, one pair per dimension, plus the
    acknowledgement evaluation toggle.

    List values may be given as comma-separated strings; entries are
    stripped and de-duplicated case-insensitively.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    include_entity_types: tuple[str, ...] = ()
    exclude_entity_types: tuple[str, ...] = ()
    include_entity_names: tuple[str, ...] = ()
    exclude_entity_names: tuple[str, ...] = ()
    include_entity_resource_pools: tuple[str, ...] = ()
    exclude_entity_resource_pools: tuple[str, ...] = ()
    include_alarm_names: tuple[str, ...] = ()
    exclude_alarm_names: tuple[str, ...] = ()
    include_alarm_descriptions: tuple[str, ...] = ()
    exclude_alarm_descriptions: tuple[str, ...] = ()
    include_alarm_statuses: tuple[str, ...] = ()
    exclude_alarm_statuses: tuple[str, ...] = ()
    evaluate_acknowledged: bool = False

    @field_validator(*_LIST_FIELDS, mode="before")
    @classmethod
    def _clean_list(cls, value: Any) -> tuple[str, ...]:
        return dedupe_fold(split_csv(value))

    def is_empty(self) -> bool:
        return not any(getattr(self, name) for name in _LIST_FIELDS)


class CheckConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    server: str
    port: int = Field(default=443, ge=1, le=65535)
    username: str
    password: str = Field(repr=False)
    domain: str = ""
    trust_cert: bool = False
    # Seconds allowed for the vSphere connection.
    timeout: int = Field(default=10, gt=0)
    datacenter_names: tuple[str, ...] = ()
    log_level: str = "info"
    criteria: FilterCriteria = Field(default_factory=FilterCriteria)

    @field_validator("datacenter_names", mode="before")
    @classmethod
    def _clean_datacenters(cls, value: Any) -> tuple[str, ...]:
        return dedupe_fold(split_csv(value))

    @field_validator("log_level", mode="before")
    @classmethod
    def _check_log_level(cls, value: Any) -> str:
        level = str(value or "info").strip().lower()
        if level not in LOG_LEVELS:
            raise ValueError(f"unsupported log level {value!r}; expected one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def login_user(self) -> str:
        """Username qualified with the optional domain (``user@domain``)."""
        if self.domain:
            return f"{self.username}@{self.domain}"
        return self.username
