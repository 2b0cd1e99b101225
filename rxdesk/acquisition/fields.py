"""Overlay field declarations.

An OverlaySchema lists the per-item configuration fields a workflow accepts
(dosage, duration, paid, ...). Values are normalized here so staged and
committed edits go through one rule set.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from rxdesk.common.exceptions import ValidationError


@dataclass(frozen=True)
class OverlayField:
    name: str
    label: str = ""
    choices: tuple[str, ...] = ()
    numeric: bool = False
    default: Any = None


@dataclass(frozen=True)
class OverlaySchema:
    """Allowed overlay fields. An empty schema accepts any field name."""

    fields: tuple[OverlayField, ...] = ()

    @classmethod
    def of(cls, *fields: OverlayField) -> "OverlaySchema":
        return cls(fields=tuple(fields))

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def get(self, name: str) -> OverlayField | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def defaults(self) -> dict[str, Any]:
        return {f.name: f.default for f in self.fields if f.default is not None}

    def coerce(self, name: str, value: Any) -> Any:
        """Normalize one overlay value.

        Returns None when the value is blank, meaning "no override".
        Raises ValidationError for unknown fields, values outside a closed
        choice list and non-numeric input to numeric fields.
        """
        declared = self.get(name)
        if declared is None and self.fields:
            raise ValidationError(
                f"Unknown overlay field: {name}",
                field_errors={name: "not an overlay field"},
            )

        if value is None:
            return None
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return None

        if declared is None:
            return value

        if declared.choices and value not in declared.choices:
            raise ValidationError(
                f"{declared.label or name} must be one of: {', '.join(declared.choices)}",
                field_errors={name: "invalid choice"},
            )

        if declared.numeric:
            try:
                if isinstance(value, bool):
                    raise TypeError(value)
                number = float(value)
                if not math.isfinite(number):
                    raise ValueError(value)
            except (TypeError, ValueError):
                raise ValidationError(
                    f"{declared.label or name} must be a number",
                    field_errors={name: "not a number"},
                ) from None
            if number < 0:
                raise ValidationError(
                    f"{declared.label or name} cannot be negative",
                    field_errors={name: "negative"},
                )
            return number

        return value

    def coerce_many(self, values: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> dict[str, Any]:
        pairs = values.items() if isinstance(values, Mapping) else values
        out: dict[str, Any] = {}
        for name, raw in pairs:
            coerced = self.coerce(name, raw)
            if coerced is not None:
                out[name] = coerced
        return out

    def merge(self, base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
        """Defaults, then base attributes, then overrides. Overrides win."""
        merged = self.defaults()
        merged.update(base)
        merged.update(overrides)
        return merged


__all__ = ["OverlayField", "OverlaySchema"]
