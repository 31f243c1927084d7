"""Collects triggered alarms from vCenter via pyVmomi.

This is the only module that talks to the vSphere API. Everything it
returns is a plain :class:`~ncs_alarms.models.alarms.TriggeredAlarm`
snapshot; failures are raised as :class:`LoginError` or
:class:`CollectionError` so the caller can report them instead of treating
them as "no alarms".
"""

from __future__ import annotations

import contextlib
import logging
import ssl
import time
from typing import Any, Iterable, Iterator

from pydantic import ValidationError
from pyVim.connect import Disconnect, SmartConnect
from pyVmomi import vim, vmodl

from ncs_alarms.exceptions import CollectionError, LoginError
from ncs_alarms.models.alarms import AlarmEntity, TriggeredAlarm
from ncs_alarms.models.config import CheckConfig

logger = logging.getLogger(__name__)

# Hidden root resource pool present on every compute resource. It is the
# parent of all user-visible pools and is never reported.
PARENT_RESOURCE_POOL = "Resources"

_POOL_KINDS = ("ResourcePool", "VirtualApp")


def connect(config: CheckConfig) -> Any:
    """Open a session against the configured vCenter / ESXi host."""
    if config.trust_cert:
        context = ssl._create_unverified_context()
    else:
        context = ssl.create_default_context()

    logger.debug("Logging into %s:%d as %s", config.server, config.port, config.login_user)
    try:
        si = SmartConnect(
            host=config.server,
            port=config.port,
            user=config.login_user,
            pwd=config.password,
            sslContext=context,
            httpConnectionTimeout=config.timeout,
        )
    except Exception as exc:
        raise LoginError(f"error logging into {config.server!r}: {exc}") from exc

    logger.debug("Successfully logged into vSphere environment")
    return si


def disconnect(si: Any) -> None:
    try:
        Disconnect(si)
    except Exception as exc:
        logger.error("failed to logout: %s", exc)


@contextlib.contextmanager
def session(config: CheckConfig) -> Iterator[Any]:
    si = connect(config)
    try:
        yield si
    finally:
        disconnect(si)


def _kind(obj: Any) -> str:
    """Managed object type name (e.g. ``VirtualMachine``)."""
    name = getattr(obj, "_wsdlName", None)
    if name:
        return str(name)
    return type(obj).__name__.rsplit(".", 1)[-1]


def _moid(obj: Any) -> str:
    return str(getattr(obj, "_moId", "") or "")


def resource_pools(entity: Any) -> tuple[str, ...]:
    """
    Return the names of the resource pools *entity* belongs to, nearest
    first. The hidden root pool is omitted; entities that cannot live in a
    pool get an empty tuple.
    """
    kind = _kind(entity)
    if kind == "VirtualMachine":
        pool = getattr(entity, "resourcePool", None)
    elif kind in _POOL_KINDS:
        pool = getattr(entity, "parent", None)
    else:
        return ()

    names: list[str] = []
    while pool is not None and _kind(pool) in _POOL_KINDS:
        if pool.name != PARENT_RESOURCE_POOL:
            names.append(pool.name)
        pool = getattr(pool, "parent", None)
    return tuple(names)


def _to_triggered_alarm(state: Any, datacenter: str) -> TriggeredAlarm:
    alarm_def = state.alarm
    info = getattr(alarm_def, "info", None)
    entity = state.entity

    acknowledged = bool(getattr(state, "acknowledged", False))
    return TriggeredAlarm(
        key=state.key,
        name=getattr(info, "name", None) or "Unknown",
        description=getattr(info, "description", None) or "",
        entity=AlarmEntity(
            name=getattr(entity, "name", None) or _moid(entity),
            kind=_kind(entity),
            moid=_moid(entity),
            resource_pools=resource_pools(entity),
            status=getattr(entity, "overallStatus", None),
        ),
        status=state.overallStatus,
        time=getattr(state, "time", None),
        acknowledged=acknowledged,
        acknowledged_time=getattr(state, "acknowledgedTime", None),
        acknowledged_by=getattr(state, "acknowledgedByUser", None) or "",
        datacenter=datacenter,
        definition_moid=_moid(alarm_def),
    )


def get_datacenters(si: Any, names: Iterable[str] = ()) -> list[Any]:
    """
    Return the requested datacenters, or every datacenter when no names are
    given. Unknown names are an error.
    """
    names = list(names)
    try:
        content = si.RetrieveContent()
        view = content.viewManager.CreateContainerView(content.rootFolder, [vim.Datacenter], True)
        try:
            found = list(view.view)
        finally:
            view.Destroy()
    except vmodl.MethodFault as exc:
        raise CollectionError(f"failed to retrieve datacenters: {exc.msg or exc}") from exc

    if not names:
        if not found:
            raise CollectionError("no datacenters found")
        return found

    by_name = {dc.name.lower(): dc for dc in found}
    missing = [n for n in names if n.lower() not in by_name]
    if missing:
        raise CollectionError(f"datacenter(s) not found: {', '.join(missing)}")
    return [by_name[n.lower()] for n in names]


def fetch_triggered_alarms(si: Any, datacenters: Iterable[Any]) -> list[TriggeredAlarm]:
    """Retrieve every triggered alarm for the given datacenters, sorted by entity name."""
    started = time.monotonic()
    alarms: list[TriggeredAlarm] = []
    datacenters = list(datacenters)

    try:
        for dc in datacenters:
            for state in getattr(dc, "triggeredAlarmState", None) or []:
                alarms.append(_to_triggered_alarm(state, dc.name))
    except vmodl.MethodFault as exc:
        raise CollectionError(f"failed to retrieve triggered alarms: {exc.msg or exc}") from exc
    except ValidationError as exc:
        raise CollectionError(f"unexpected triggered alarm data: {exc}") from exc

    alarms.sort(key=lambda a: a.entity.name.lower())
    logger.debug(
        "Retrieved %d triggered alarms from %d datacenters in %.3fs",
        len(alarms),
        len(datacenters),
        time.monotonic() - started,
    )
    return alarms
