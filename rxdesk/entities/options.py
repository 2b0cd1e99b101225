"""Select fields and the option sets that back them."""

from __future__ import annotations

from typing import Iterable

from rx_schemas.catalog import ReferencedEntityOption


class OptionsSet:
    """Ordered, append-only list of selectable options."""

    def __init__(self, options: Iterable[ReferencedEntityOption] | None = None):
        self._options: list[ReferencedEntityOption] = list(options or [])

    def __iter__(self):
        return iter(list(self._options))

    def __len__(self) -> int:
        return len(self._options)

    def __contains__(self, option_id: object) -> bool:
        return any(o.id == option_id for o in self._options)

    @property
    def options(self) -> tuple[ReferencedEntityOption, ...]:
        return tuple(self._options)

    def get(self, option_id: str) -> ReferencedEntityOption | None:
        for option in self._options:
            if option.id == option_id:
                return option
        return None

    def append(self, option: ReferencedEntityOption) -> None:
        self._options.append(option)

    def as_select_data(self) -> list[dict[str, str]]:
        return [o.to_select_option() for o in self._options]


class SelectField:
    """A named form field whose value is the id of one option (or None)."""

    def __init__(
        self,
        name: str,
        options: OptionsSet | Iterable[ReferencedEntityOption] | None = None,
        *,
        required: bool = False,
        value: str | None = None,
    ) -> None:
        self.name = name
        self.options = options if isinstance(options, OptionsSet) else OptionsSet(options)
        self.required = required
        self.value = value

    @property
    def selected(self) -> ReferencedEntityOption | None:
        return None if self.value is None else self.options.get(self.value)

    def select(self, value: str | None) -> None:
        self.value = value or None

    def clear(self) -> None:
        self.value = None


__all__ = ["OptionsSet", "SelectField"]
