"""Plugin configuration assembly: CLI settings, optional YAML file, logging."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from ncs_alarms.exceptions import ConfigError
from ncs_alarms.models.config import CheckConfig, FilterCriteria
from ncs_alarms.primitives import STATUS_GREEN, STATUS_KEYWORDS, canonical_status, split_csv

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Log level keywords accepted by the plugin, mapped onto logging levels.
_LOG_LEVELS = {
    "panic": logging.CRITICAL,
    "fatal": logging.CRITICAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,
}

_CRITERIA_FIELDS = frozenset(FilterCriteria.model_fields)


def configure_logging(level: str) -> None:
    """
    Route log output to stderr at the requested level. Standard output is
    reserved for the plugin result.
    """
    level = (level or "info").lower()
    if level == "disabled":
        logging.disable(logging.CRITICAL)
        return
    logging.disable(logging.NOTSET)
    logging.basicConfig(
        level=_LOG_LEVELS.get(level, logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )


def load_config_file(path: str | Path) -> dict[str, Any]:
    """Load settings from a YAML mapping. Keys mirror the CLI option names."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(f"unable to read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in config file {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a YAML mapping")

    # Accept both flat keys and a nested "criteria" section.
    nested = data.pop("criteria", None) or {}
    if not isinstance(nested, dict):
        raise ConfigError(f"config file {path}: 'criteria' must be a mapping")
    logger.debug("Loaded %d settings from %s", len(nested) + len(data), path)
    return {**nested, **data}


def validate_status_keywords(values: Any, direction: str) -> None:
    """
    Reject unrecognised status keywords. Alarms never trigger for the
    green/ok status, so those are rejected as well.
    """
    for keyword in split_csv(values):
        status = canonical_status(keyword)
        if status is None or status == STATUS_GREEN:
            accepted = ", ".join(k for k in STATUS_KEYWORDS if canonical_status(k) != STATUS_GREEN)
            raise ConfigError(f"invalid triggered alarm status for {direction}: {keyword!r} (expected one of {accepted})")


def build_config(settings: Mapping[str, Any]) -> CheckConfig:
    """Build a validated CheckConfig from a flat settings mapping."""
    settings = {k: v for k, v in settings.items() if v is not None}

    validate_status_keywords(settings.get("include_alarm_statuses"), "inclusion")
    validate_status_keywords(settings.get("exclude_alarm_statuses"), "exclusion")

    criteria = {k: v for k, v in settings.items() if k in _CRITERIA_FIELDS}
    rest = {k: v for k, v in settings.items() if k not in _CRITERIA_FIELDS}

    try:
        return CheckConfig(criteria=FilterCriteria(**criteria), **rest)
    except ValidationError as exc:
        raise ConfigError(_format_validation_error(exc)) from exc
    except TypeError as exc:
        raise ConfigError(str(exc)) from exc


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "config"
        parts.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return "invalid configuration: " + "; ".join(parts)
