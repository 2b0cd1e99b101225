"""Vital sign entry and classification."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from rx_schemas.vitals import VitalDefinition, VitalStatus
from rxdesk.common.exceptions import ValidationError

# Used until the clinic's own vital list has been loaded.
DEFAULT_VITALS: tuple[VitalDefinition, ...] = (
    VitalDefinition(key="weight", name="Weight", lower_limit=2, higher_limit=200, unit="kg"),
    VitalDefinition(key="height", name="Height", lower_limit=40, higher_limit=220, unit="cm"),
    VitalDefinition(key="temperature", name="Temperature", lower_limit=97, higher_limit=99.5, unit="°F"),
    VitalDefinition(key="systolic", name="Systolic BP", lower_limit=90, higher_limit=130, unit="mmHg"),
    VitalDefinition(key="diastolic", name="Diastolic BP", lower_limit=60, higher_limit=85, unit="mmHg"),
    VitalDefinition(key="pulse_rate", name="Pulse rate", lower_limit=60, higher_limit=100, unit="bpm"),
    VitalDefinition(key="heart_rate", name="Heart rate", lower_limit=60, higher_limit=100, unit="bpm"),
    VitalDefinition(key="spo2", name="SpO2", lower_limit=95, higher_limit=100, unit="%"),
)


@dataclass(frozen=True, slots=True)
class VitalReading:
    definition: VitalDefinition
    value: str
    status: Optional[VitalStatus]

    @property
    def text(self) -> str:
        return f"{self.value} {self.definition.unit}".strip()


class VitalsPanel:
    def __init__(self, definitions: Iterable[VitalDefinition] | None = None):
        self._definitions: dict[str, VitalDefinition] = {}
        self._values: dict[str, str] = {}
        self.set_definitions(DEFAULT_VITALS if definitions is None else definitions)

    @property
    def definitions(self) -> tuple[VitalDefinition, ...]:
        return tuple(self._definitions.values())

    def set_definitions(self, definitions: Iterable[VitalDefinition]) -> None:
        """Replace the vital list; values for vitals no longer listed are dropped."""
        self._definitions = {d.key: d for d in definitions}
        self._values = {k: v for k, v in self._values.items() if k in self._definitions}

    def set_value(self, key: str, value: str | float | None) -> None:
        if key not in self._definitions:
            raise ValidationError(f"Unknown vital: {key}", field_errors={key: "unknown vital"})
        text = "" if value is None else str(value).strip()
        if text:
            self._values[key] = text
        else:
            self._values.pop(key, None)

    def value(self, key: str) -> str:
        return self._values.get(key, "")

    def status(self, key: str) -> Optional[VitalStatus]:
        definition = self._definitions.get(key)
        if definition is None:
            return None
        return definition.classify(self._values.get(key))

    def entered(self) -> list[VitalReading]:
        """Readings with a value, in definition order."""
        return [
            VitalReading(definition=d, value=self._values[d.key], status=d.classify(self._values[d.key]))
            for d in self._definitions.values()
            if self._values.get(d.key)
        ]

    def readings(self) -> dict[str, str]:
        """`{key: "value unit"}` for every entered vital."""
        return {r.definition.key: r.text for r in self.entered()}

    def clear(self) -> None:
        self._values.clear()


__all__ = ["DEFAULT_VITALS", "VitalReading", "VitalsPanel"]
