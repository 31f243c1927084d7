from typing import Optional

from pydantic import BaseModel

from ncs_alarms.primitives import State


class CheckResult(BaseModel):
    """Everything a monitoring-plugin invocation reports back to the scheduler."""

    state: State = State.OK
    service_output: str = ""
    long_output: str = ""
    last_error: Optional[str] = None
    critical_threshold: str = ""
    warning_threshold: str = ""

    @property
    def exit_code(self) -> int:
        return self.state.exit_code

    def render(self) -> str:
        lines = [self.service_output or f"{self.state.label}: no details available"]
        if self.last_error:
            lines.extend(["", "**ERRORS**", "", f"* {self.last_error}"])
        if self.critical_threshold or self.warning_threshold:
            lines.extend(
                [
                    "",
                    "**THRESHOLDS**",
                    "",
                    f"* CRITICAL: {self.critical_threshold or 'n/a'}",
                    f"* WARNING: {self.warning_threshold or 'n/a'}",
                ]
            )
        if self.long_output:
            lines.extend(["", "**DETAILED INFO**", "", self.long_output.rstrip("\n")])
        return "\n".join(lines) + "\n"
