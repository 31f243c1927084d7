from .alarms import AlarmEntity, Classification, Dimension, Outcome, TriggeredAlarm
from .config import CheckConfig, FilterCriteria
from .result import CheckResult

__all__ = [
    "AlarmEntity",
    "CheckConfig",
    "CheckResult",
    "Classification",
    "Dimension",
    "FilterCriteria",
    "Outcome",
    "TriggeredAlarm",
]
