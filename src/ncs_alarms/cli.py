import logging
from typing import Any, Sequence

import click
from click.core import ParameterSource

from ncs_alarms import collector, report, severity
from ncs_alarms.config import build_config, configure_logging, load_config_file
from ncs_alarms.exceptions import AlarmsError, CollectionError, ConfigError, LoginError
from ncs_alarms.filtering import classify
from ncs_alarms.models.alarms import TriggeredAlarm
from ncs_alarms.models.config import LOG_LEVELS, CheckConfig
from ncs_alarms.models.result import CheckResult
from ncs_alarms.primitives import State

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Poll cycle
# ---------------------------------------------------------------------------

def evaluate_alarms(config: CheckConfig, alarms: Sequence[TriggeredAlarm], datacenters_evaluated: Sequence[str]) -> CheckResult:
    """Classify a fetched snapshot and turn it into a plugin result."""
    classified = classify(alarms, config.criteria)
    state = severity.overall_state(classified)

    if state is State.OK:
        logger.info("No non-excluded alarms detected")
        last_error = None
    else:
        logger.error(
            "Non-excluded alarms detected (total: %d, evaluated: %d, excluded: %d)",
            len(classified),
            sum(1 for a in classified if not a.excluded),
            sum(1 for a in classified if a.excluded),
        )
        last_error = "alarm detected and not excluded from evaluation"

    return CheckResult(
        state=state,
        service_output=report.one_line_summary(state, classified, datacenters_evaluated),
        long_output=report.alarms_report(
            classified,
            config.criteria,
            server=config.server,
            datacenters_specified=config.datacenter_names,
            datacenters_evaluated=datacenters_evaluated,
        ),
        last_error=last_error,
        critical_threshold=report.CRITICAL_THRESHOLD,
        warning_threshold=report.WARNING_THRESHOLD,
    )


def _failure(summary: str, exc: Exception, state: State = State.CRITICAL) -> CheckResult:
    return CheckResult(
        state=state,
        service_output=f"{state.label}: {summary}",
        last_error=str(exc),
        critical_threshold=report.CRITICAL_THRESHOLD,
        warning_threshold=report.WARNING_THRESHOLD,
    )


def run_check(config: CheckConfig) -> CheckResult:
    """
    Run one poll cycle. Login and retrieval failures end the cycle before
    any filtering takes place.
    """
    try:
        with collector.session(config) as si:
            datacenters = collector.get_datacenters(si, config.datacenter_names)
            alarms = collector.fetch_triggered_alarms(si, datacenters)
            dc_names = [dc.name for dc in datacenters]
    except LoginError as exc:
        logger.error("%s", exc)
        return _failure(f"Error logging into {config.server!r}", exc)
    except CollectionError as exc:
        logger.error("error retrieving alarms: %s", exc)
        return _failure("Error retrieving alarms", exc)

    logger.debug("%d triggered alarms found", len(alarms))
    return evaluate_alarms(config, alarms, dc_names)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def _settings(config_path: str | None, params: dict[str, Any]) -> dict[str, Any]:
    """Overlay command-line values on the optional config file."""
    ctx = click.get_current_context()
    settings = load_config_file(config_path) if config_path else {}
    for name, value in params.items():
        if name in settings and ctx.get_parameter_source(name) is ParameterSource.DEFAULT:
            continue
        settings[name] = value
    return settings


def _emit(result: CheckResult) -> None:
    click.echo(result.render(), nl=False)
    raise SystemExit(result.exit_code)


_LIST_OPTION = {"multiple": True, "metavar": "LIST"}


@click.command(name="check_vmware_alarms")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="YAML file with default settings. Command-line flags take precedence.")
@click.option("--server", help="FQDN or IP Address of the ESXi host or vCenter instance.")
@click.option("--port", type=int, default=443, show_default=True, help="TCP port of the remote ESXi host or vCenter instance.")
@click.option("--username", help="Username with permission to access the ESXi host or vCenter instance.")
@click.option("--password", envvar="VC_PASSWORD", help="Password used to login (or set VC_PASSWORD).")
@click.option("--domain", help="Optional domain for the user account.")
@click.option("--trust-cert", is_flag=True, default=False, help="Trust the certificate as-is without validation.")
@click.option("--timeout", type=int, default=10, show_default=True, help="Seconds allowed for the connection before giving up.")
@click.option("--dc-name", "datacenter_names", **_LIST_OPTION, help="Comma-separated datacenter names to evaluate. Defaults to all.")
@click.option("--include-type", "include_entity_types", **_LIST_OPTION, help="Managed object types to explicitly include (e.g. VirtualMachine,Datastore).")
@click.option("--exclude-type", "exclude_entity_types", **_LIST_OPTION, help="Managed object types to explicitly exclude.")
@click.option("--include-entity-name", "include_entity_names", **_LIST_OPTION, help="Entity name substrings to explicitly include.")
@click.option("--exclude-entity-name", "exclude_entity_names", **_LIST_OPTION, help="Entity name substrings to explicitly exclude.")
@click.option("--include-entity-rp", "include_entity_resource_pools", **_LIST_OPTION, help="Resource pools whose entities are explicitly included.")
@click.option("--exclude-entity-rp", "exclude_entity_resource_pools", **_LIST_OPTION, help="Resource pools whose entities are explicitly excluded.")
@click.option("--include-name", "include_alarm_names", **_LIST_OPTION, help="Alarm name substrings to explicitly include.")
@click.option("--exclude-name", "exclude_alarm_names", **_LIST_OPTION, help="Alarm name substrings to explicitly exclude.")
@click.option("--include-desc", "include_alarm_descriptions", **_LIST_OPTION, help="Alarm description substrings to explicitly include.")
@click.option("--exclude-desc", "exclude_alarm_descriptions", **_LIST_OPTION, help="Alarm description substrings to explicitly exclude.")
@click.option("--include-status", "include_alarm_statuses", **_LIST_OPTION, help="Alarm statuses to explicitly include (red/critical, yellow/warning, gray/unknown).")
@click.option("--exclude-status", "exclude_alarm_statuses", **_LIST_OPTION, help="Alarm statuses to explicitly exclude.")
@click.option("--eval-acknowledged", "evaluate_acknowledged", is_flag=True, default=False, help="Also evaluate previously acknowledged alarms.")
@click.option("--log-level", type=click.Choice(LOG_LEVELS, case_sensitive=False), default="info", show_default=True, help="Log level (messages go to stderr).")
def main(config_path: str | None, **params: Any) -> None:
    """Monitor vSphere datacenters for non-excluded Triggered Alarms."""
    try:
        config = build_config(_settings(config_path, params))
    except ConfigError as exc:
        configure_logging("error")
        logger.error("Error initializing application: %s", exc)
        _emit(_failure("Error initializing application", exc))
        return

    configure_logging(config.log_level)

    try:
        result = run_check(config)
    except AlarmsError as exc:
        logger.exception("check failed")
        result = _failure("Error evaluating alarms", exc, State.UNKNOWN)
    except Exception as exc:
        logger.exception("unexpected error")
        result = _failure("Unexpected error", exc, State.UNKNOWN)
    _emit(result)


if __name__ == "__main__":
    main()
