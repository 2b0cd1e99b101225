"""Selection contexts for in-form entity creation.

Each variant owns its field model, its label rule and the select field it
feeds. The set of variants is closed: `SelectionContext` is a pydantic
discriminated union on `kind`.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Literal, Mapping, Union, cast, get_args

from pydantic import BaseModel, Field, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError

from rxdesk.common.exceptions import ValidationError

ReferrerTitle = Literal["Dr.", "Mr.", "Ms.", "Mrs."]
REFERRER_TITLES: tuple[str, ...] = get_args(ReferrerTitle)


class ReferrerFields(BaseModel):
    title: ReferrerTitle = "Dr."
    first_name: str = ""
    last_name: str = ""
    degree: str = ""
    mobile: str = ""
    email: str = ""
    address: str = ""
    active: bool = True

    model_config = {"str_strip_whitespace": True, "extra": "ignore"}

    @field_validator("first_name")
    @classmethod
    def _first_name_required(cls, value: str) -> str:
        if not value:
            raise ValueError("is required")
        return value


class CollectionAgentFields(BaseModel):
    name: str = ""

    model_config = {"str_strip_whitespace": True, "extra": "ignore"}

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        if not value:
            raise ValueError("is required")
        return value


class CatalogLinkFields(BaseModel):
    link: str = ""
    name: str = ""

    model_config = {"str_strip_whitespace": True, "extra": "ignore"}

    @field_validator("link")
    @classmethod
    def _link_required(cls, value: str) -> str:
        if not value:
            raise ValueError("is required")
        return value


class CatalogLink(BaseModel):
    """A catalog page new entries can be created from."""

    id: str
    title: str
    description: str = ""
    href: str | None = None

    model_config = {"frozen": True}


DEFAULT_CATALOG_LINKS: tuple[CatalogLink, ...] = (
    CatalogLink(
        id="packages",
        title="Packages",
        description="Groups of tests across categories, ordered as a whole.",
        href="/ratelist/packages",
    ),
    CatalogLink(
        id="panels",
        title="Panels",
        description="Groups of tests from one category, printed under a separate title.",
        href="/ratelist/panels",
    ),
    CatalogLink(
        id="tests",
        title="Tests",
        description="Individual lab tests.",
        href="/ratelist/test-database",
    ),
)


def _field_errors(exc: PydanticValidationError) -> dict[str, str]:
    errors: dict[str, str] = {}
    for err in exc.errors():
        loc = err.get("loc") or ("__root__",)
        key = str(loc[0])
        msg = str(err.get("msg", "invalid"))
        # pydantic prefixes custom ValueError messages
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        errors.setdefault(key, msg)
    return errors


class _ContextBase(BaseModel):
    target_field: str

    model_config = {"frozen": True}

    fields_model: ClassVar[type[BaseModel]]

    def validate_fields(self, raw: Mapping[str, Any]) -> BaseModel:
        """Validate raw form input against this variant's field model."""
        try:
            return self.fields_model.model_validate(dict(raw))
        except PydanticValidationError as exc:
            field_errors = _field_errors(exc)
            raise ValidationError(
                f"Invalid {self.kind} details: " + ", ".join(sorted(field_errors)),  # type: ignore[attr-defined]
                field_errors=field_errors,
            ) from None

    def label_for(self, fields: BaseModel | Mapping[str, Any]) -> str:
        raise NotImplementedError

    def _coerce(self, fields: BaseModel | Mapping[str, Any]) -> BaseModel:
        """`fields` as an instance of this variant's field model, validating if needed."""
        if isinstance(fields, self.fields_model):
            return fields
        raw = fields.model_dump() if isinstance(fields, BaseModel) else fields
        return self.validate_fields(raw)


class ReferrerContext(_ContextBase):
    kind: Literal["referrer"] = "referrer"
    target_field: str = "referred_by"
    fields_model: ClassVar[type[BaseModel]] = ReferrerFields

    def label_for(self, fields: BaseModel | Mapping[str, Any]) -> str:
        referrer = cast(ReferrerFields, self._coerce(fields))
        parts = (referrer.title, referrer.first_name, referrer.last_name)
        return " ".join(p for p in parts if p).strip()


class CollectionAgentContext(_ContextBase):
    kind: Literal["collection-agent"] = "collection-agent"
    target_field: str = "sample_collection_agent"
    fields_model: ClassVar[type[BaseModel]] = CollectionAgentFields

    def label_for(self, fields: BaseModel | Mapping[str, Any]) -> str:
        return cast(CollectionAgentFields, self._coerce(fields)).name


class CatalogLinkContext(_ContextBase):
    kind: Literal["catalog-link"] = "catalog-link"
    target_field: str = "catalog_item"
    links: tuple[CatalogLink, ...] = DEFAULT_CATALOG_LINKS
    fields_model: ClassVar[type[BaseModel]] = CatalogLinkFields

    def link(self, link_id: str) -> CatalogLink | None:
        for link in self.links:
            if link.id == link_id:
                return link
        return None

    def validate_fields(self, raw: Mapping[str, Any]) -> BaseModel:
        fields = cast(CatalogLinkFields, super().validate_fields(raw))
        if not self.links:
            raise ValidationError(
                "No catalog pages are configured",
                field_errors={"link": "no links configured"},
            )
        if self.link(fields.link) is None:
            raise ValidationError(
                f"Unknown catalog link: {fields.link}",
                field_errors={"link": "unknown link"},
            )
        return fields

    def label_for(self, fields: BaseModel | Mapping[str, Any]) -> str:
        chosen = cast(CatalogLinkFields, self._coerce(fields))
        link = self.link(chosen.link)
        title = link.title if link is not None else chosen.link
        return f"{title}: {chosen.name}" if chosen.name else title


SelectionContext = Annotated[
    Union[ReferrerContext, CollectionAgentContext, CatalogLinkContext],
    Field(discriminator="kind"),
]

_context_adapter: TypeAdapter[Any] = TypeAdapter(SelectionContext)


def parse_context(data: Mapping[str, Any] | _ContextBase) -> ReferrerContext | CollectionAgentContext | CatalogLinkContext:
    """Build a SelectionContext from `{"kind": ..., ...}`."""
    if isinstance(data, _ContextBase):
        return data  # type: ignore[return-value]
    try:
        return _context_adapter.validate_python(dict(data))
    except PydanticValidationError as exc:
        raise ValidationError("Invalid selection context", field_errors=_field_errors(exc)) from None


__all__ = [
    "REFERRER_TITLES",
    "ReferrerTitle",
    "ReferrerFields",
    "CollectionAgentFields",
    "CatalogLinkFields",
    "CatalogLink",
    "DEFAULT_CATALOG_LINKS",
    "ReferrerContext",
    "CollectionAgentContext",
    "CatalogLinkContext",
    "SelectionContext",
    "parse_context",
]
