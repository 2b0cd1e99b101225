from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, field_validator

VitalStatus = Literal["normal", "high", "low"]


class VitalDefinition(BaseModel):
    """Vital sign with its reference range."""

    key: str
    name: str
    lower_limit: float
    higher_limit: float
    unit: str = ""

    model_config = {"frozen": True}

    @field_validator("lower_limit", "higher_limit", mode="before")
    @classmethod
    def _parse_limit(cls, value: object) -> object:
        # Limits arrive as strings from the vitals endpoint.
        if isinstance(value, str):
            return float(value.strip())
        return value

    def classify(self, value: str | float | None) -> Optional[VitalStatus]:
        """Return high/low/normal for a reading, or None if it is not numeric."""
        if value is None:
            return None
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return None
            try:
                value = float(value)
            except ValueError:
                return None
        if value > self.higher_limit:
            return "high"
        if value < self.lower_limit:
            return "low"
        return "normal"
