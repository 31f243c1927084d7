"""Exception hierarchy for the vSphere alarm check."""


class AlarmsError(Exception):
    """Base class for all errors raised by ncs_alarms."""


class ConfigError(AlarmsError):
    """Invalid or incomplete plugin configuration."""


class LoginError(AlarmsError):
    """Establishing a session with the vSphere endpoint failed."""


class CollectionError(AlarmsError):
    """Retrieving the triggered alarm snapshot failed."""


class AlarmNotFoundError(AlarmsError, LookupError):
    """No triggered alarm in the collection carries the requested key."""

    def __init__(self, key: str) -> None:
        super().__init__(f"provided key does not match a triggered alarm in this collection: {key}")
        self.key = key
