"""Tests for the pydantic models."""

import unittest
from datetime import datetime, timezone

from alarm_fixtures import make_alarm
from pydantic import ValidationError

from ncs_alarms.models import (
    AlarmEntity,
    CheckResult,
    Classification,
    Dimension,
    FilterCriteria,
    Outcome,
    TriggeredAlarm,
)
from ncs_alarms.primitives import State


class AlarmEntityTests(unittest.TestCase):
    def test_status_is_normalised(self):
        self.assertEqual(AlarmEntity(name="ds1", kind="Datastore", status="YELLOW").status, "yellow")
        self.assertEqual(AlarmEntity(name="ds1", kind="Datastore", status=None).status, "gray")

    def test_vm_may_have_no_pools(self):
        entity = AlarmEntity(name="vm01", kind="VirtualMachine")
        self.assertEqual(entity.resource_pools, ())

    def test_non_pool_kinds_reject_pools(self):
        with self.assertRaises(ValidationError):
            AlarmEntity(name="ds1", kind="Datastore", resource_pools=["Production"])
        with self.assertRaises(ValidationError):
            AlarmEntity(name="esx01", kind="HostSystem", resource_pools=["Production"])

    def test_pool_kinds_accept_pools(self):
        entity = AlarmEntity(name="web", kind="ResourcePool", resource_pools=["Production"])
        self.assertEqual(entity.resource_pools, ("Production",))


class TriggeredAlarmTests(unittest.TestCase):
    def test_defaults(self):
        alarm = make_alarm()
        self.assertFalse(alarm.excluded)
        self.assertFalse(alarm.explicitly_included)
        self.assertFalse(alarm.explicitly_excluded)
        self.assertEqual(alarm.exclusion_reason, "")
        self.assertEqual(alarm.entity_label, "vm01 (type VirtualMachine)")

    def test_records_are_frozen(self):
        alarm = make_alarm()
        with self.assertRaises(ValidationError):
            alarm.excluded = True

    def test_unacknowledged_alarm_drops_ack_metadata(self):
        alarm = make_alarm(
            acknowledged=False,
            acknowledged_time=datetime(2026, 1, 1, tzinfo=timezone.utc),
            acknowledged_by="Ash",
        )
        self.assertIsNone(alarm.acknowledged_time)
        self.assertEqual(alarm.acknowledged_by, "")

    def test_acknowledged_alarm_keeps_ack_metadata(self):
        alarm = make_alarm(acknowledged=True, acknowledged_by="Ash")
        self.assertEqual(alarm.acknowledged_by, "Ash")

    def test_extra_fields_are_ignored(self):
        alarm = TriggeredAlarm(
            key="alarm-1.vm-1",
            name="Test",
            entity={"name": "vm01", "kind": "VirtualMachine"},
            eventKey=42,
        )
        self.assertEqual(alarm.entity.name, "vm01")


class ClassificationTests(unittest.TestCase):
    def test_kept(self):
        result = Classification(explicitly_included=True)
        self.assertFalse(result.excluded)
        self.assertFalse(result.explicitly_excluded)

    def test_apply_returns_copy(self):
        alarm = make_alarm()
        result = Classification(outcome=Outcome.EXCLUDED_IMPLICIT, dimension=Dimension.ALARM_STATUS)
        copy = result.apply(alarm)
        self.assertIsNot(copy, alarm)
        self.assertTrue(copy.excluded)
        self.assertFalse(copy.explicitly_excluded)
        self.assertEqual(copy.exclusion_reason, "alarm status")
        self.assertFalse(alarm.excluded)


class FilterCriteriaTests(unittest.TestCase):
    def test_comma_separated_values(self):
        criteria = FilterCriteria(include_entity_types="VirtualMachine, Datastore,,virtualmachine")
        self.assertEqual(criteria.include_entity_types, ("VirtualMachine", "Datastore"))

    def test_repeated_values(self):
        criteria = FilterCriteria(exclude_alarm_names=["CPU usage,memory", " disk "])
        self.assertEqual(criteria.exclude_alarm_names, ("CPU usage", "memory", "disk"))

    def test_unknown_field_rejected(self):
        with self.assertRaises(ValidationError):
            FilterCriteria(include_colors=["red"])

    def test_is_empty_ignores_acknowledged_toggle(self):
        self.assertTrue(FilterCriteria(evaluate_acknowledged=True).is_empty())
        self.assertFalse(FilterCriteria(include_alarm_statuses=["red"]).is_empty())


class CheckResultTests(unittest.TestCase):
    def test_render_sections(self):
        result = CheckResult(
            state=State.WARNING,
            service_output="WARNING: 1 non-excluded Triggered Alarms detected",
            long_output="details\n",
            last_error="alarm detected and not excluded from evaluation",
            critical_threshold="red",
            warning_threshold="yellow",
        )
        text = result.render()
        self.assertTrue(text.startswith("WARNING: 1 non-excluded"))
        self.assertIn("**ERRORS**", text)
        self.assertIn("* CRITICAL: red", text)
        self.assertIn("* WARNING: yellow", text)
        self.assertIn("**DETAILED INFO**\n\ndetails\n", text)
        self.assertEqual(result.exit_code, 1)

    def test_render_without_details(self):
        text = CheckResult(state=State.OK, service_output="OK: fine").render()
        self.assertEqual(text, "OK: fine\n")


if __name__ == "__main__":
    unittest.main()
