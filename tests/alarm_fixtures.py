"""Shared triggered alarm fixtures for the unit tests."""

from datetime import datetime, timedelta, timezone

from ncs_alarms.models import AlarmEntity, TriggeredAlarm

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)

DATASTORE_DESC = "Default alarm to monitor datastore disk usage"
VM_CPU_DESC = "Default alarm to monitor virtual machine CPU usage"
VM_MEM_DESC = "Default alarm to monitor virtual machine memory usage"


def make_alarm(key="alarm-1.vm-1", name="Test alarm", status="red", kind="VirtualMachine", entity_name="vm01", **kwargs):
    pools = kwargs.pop("resource_pools", ())
    entity_status = kwargs.pop("entity_status", status)
    kwargs.setdefault("datacenter", "Example")
    return TriggeredAlarm(
        key=key,
        name=name,
        status=status,
        entity=AlarmEntity(name=entity_name, kind=kind, resource_pools=pools, status=entity_status),
        **kwargs,
    )


def sample_alarms():
    """Three datastore alarms (one acknowledged) and three VM alarms in two pools."""
    return [
        make_alarm(
            key="alarm-8.datastore-50120",
            name="Datastore usage on disk",
            description=DATASTORE_DESC,
            status="yellow",
            kind="Datastore",
            entity_name="RES-DC1-S6200-vol12",
            entity_status="red",
            time=NOW - timedelta(days=1),
            acknowledged=True,
            acknowledged_time=NOW - timedelta(hours=5),
            acknowledged_by="Ash",
        ),
        make_alarm(
            key="alarm-8.datastore-50119",
            name="Datastore usage on disk",
            description=DATASTORE_DESC,
            status="yellow",
            kind="Datastore",
            entity_name="RES-DC1-S6200-vol11",
            time=NOW - timedelta(days=1),
        ),
        make_alarm(
            key="alarm-8.datastore-141490",
            name="Datastore usage on disk",
            description=DATASTORE_DESC,
            status="red",
            kind="Datastore",
            entity_name="HUSVM-DC1-DigColl-vol8",
            time=NOW - timedelta(hours=3),
        ),
        make_alarm(
            key="alarm-6.vm-197",
            name="Virtual machine CPU usage",
            description=VM_CPU_DESC,
            status="red",
            entity_name="node1.example.com",
            resource_pools=("Production",),
            time=NOW - timedelta(hours=2),
        ),
        make_alarm(
            key="alarm-7.vm-197",
            name="Virtual machine memory usage",
            description=VM_MEM_DESC,
            status="red",
            entity_name="node1.example.com",
            resource_pools=("Production",),
            time=NOW - timedelta(hours=2),
        ),
        make_alarm(
            key="alarm-7.vm-198",
            name="Virtual machine memory usage",
            description=VM_MEM_DESC,
            status="red",
            entity_name="node2.example.com",
            resource_pools=("Development",),
            time=NOW - timedelta(hours=1),
        ),
    ]


def kept_keys(alarms):
    return [a.key for a in alarms if not a.excluded]
