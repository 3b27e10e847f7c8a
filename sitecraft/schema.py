"""Schema validation for site content.

This module turns untrusted input (a mapping decoded from JSON or YAML)
into a trusted SiteContent aggregate. The wire form is described by
pydantic models whose fields are declared in check order:

    root mapping -> id -> createdAt -> updatedAt -> version -> locale
    -> pages (non-empty, then each page in order) -> seo -> state

Validation is fail-fast: pydantic reports errors in field order and the
first one is raised as ContentValidationError. The input is never mutated.

Key functions:
- validate_site_content: Validate and build a SiteContent, or raise.
- is_valid_site_content: Boolean variant that never raises.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import ContentValidationError
from .models import (
    ContentState,
    Locale,
    Page,
    SemanticVersion,
    SeoMetadata,
    SiteContent,
)

VERSION_PARTS_MESSAGE = "Version must contain non-negative integers (major, minor, patch)"


def _is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _parse_timestamp(value: Any) -> str | None:
    """Return the ISO form of a timestamp, or None if it is not one.

    Accepts ISO-8601 strings (including a trailing ``Z``) and datetime/date
    objects, which YAML loaders produce for unquoted timestamps.
    """
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        datetime.fromisoformat(text)
    except ValueError:
        return None
    return value


def require_mapping(data: Any, message: str) -> dict[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(message)
    return dict(data)


class _WireModel(BaseModel):
    # Missing fields fall back to None and still go through the validators,
    # so every problem is reported with its own message.
    model_config = ConfigDict(validate_default=True, extra="ignore")


class VersionModel(_WireModel):
    major: int = None
    minor: int = None
    patch: int = None

    @model_validator(mode="before")
    @classmethod
    def _check_object(cls, data: Any) -> Any:
        return require_mapping(data, "Version must be an object")

    @field_validator("major", "minor", "patch", mode="before")
    @classmethod
    def _check_part(cls, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(VERSION_PARTS_MESSAGE)
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if not isinstance(value, int) or value < 0:
            raise ValueError(VERSION_PARTS_MESSAGE)
        return value


class PageModel(_WireModel):
    slug: str = None
    title: str = None
    body: str = None

    @model_validator(mode="before")
    @classmethod
    def _check_object(cls, data: Any) -> Any:
        return require_mapping(data, "page must be an object")

    @field_validator("slug", "title", mode="before")
    @classmethod
    def _check_text(cls, value: Any, info) -> str:
        if not _is_non_empty_string(value):
            raise ValueError(f"{info.field_name} must be a non-empty string")
        return value

    @field_validator("body", mode="before")
    @classmethod
    def _check_body(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("body must be a string")
        return value


class SeoModel(_WireModel):
    title: str = None
    description: str = None
    noindex: bool | None = None

    @model_validator(mode="before")
    @classmethod
    def _check_object(cls, data: Any) -> Any:
        return require_mapping(data, "SEO metadata must be an object")

    @field_validator("title", "description", mode="before")
    @classmethod
    def _check_text(cls, value: Any, info) -> str:
        if not _is_non_empty_string(value):
            raise ValueError(f"SEO {info.field_name} must be a non-empty string")
        return value

    @field_validator("noindex", mode="before")
    @classmethod
    def _check_noindex(cls, value: Any) -> bool | None:
        if value is not None and not isinstance(value, bool):
            raise ValueError("SEO noindex must be a boolean if defined")
        return value


class SiteContentModel(_WireModel):
    """Wire form of the SiteContent aggregate (camelCase keys)."""

    id: str = None
    created_at: str = Field(default=None, alias="createdAt")
    updated_at: str = Field(default=None, alias="updatedAt")
    version: VersionModel = None
    locale: Locale = None
    pages: list[PageModel] = None
    seo: SeoModel = None
    state: ContentState = None

    @model_validator(mode="before")
    @classmethod
    def _check_object(cls, data: Any) -> Any:
        return require_mapping(data, "SiteContent must be an object")

    @field_validator("id", mode="before")
    @classmethod
    def _check_id(cls, value: Any) -> str:
        if not _is_non_empty_string(value):
            raise ValueError("id must be a non-empty string")
        return value

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _check_timestamp(cls, value: Any, info) -> str:
        timestamp = _parse_timestamp(value)
        if timestamp is None:
            alias = cls.model_fields[info.field_name].alias
            raise ValueError(f"{alias} must be a valid ISO date string")
        return timestamp

    @field_validator("locale", mode="before")
    @classmethod
    def _check_locale(cls, value: Any) -> Locale:
        try:
            return Locale(value)
        except ValueError:
            allowed = " or ".join(f"'{locale.value}'" for locale in Locale)
            raise ValueError(f"Locale must be {allowed}") from None

    @field_validator("pages", mode="before")
    @classmethod
    def _check_pages(cls, value: Any) -> list[Any]:
        if not isinstance(value, (list, tuple)) or not value:
            raise ValueError("At least one page is required")
        return list(value)

    @field_validator("state", mode="before")
    @classmethod
    def _check_state(cls, value: Any) -> ContentState:
        try:
            return ContentState(value)
        except ValueError:
            raise ValueError(f"Invalid content state: {value}") from None

    def to_content(self) -> SiteContent:
        """Convert the validated wire form into the domain aggregate."""
        return SiteContent(
            id=self.id,
            created_at=self.created_at,
            updated_at=self.updated_at,
            version=SemanticVersion(self.version.major, self.version.minor, self.version.patch),
            locale=self.locale,
            pages=tuple(Page(slug=p.slug, title=p.title, body=p.body) for p in self.pages),
            seo=SeoMetadata(
                title=self.seo.title,
                description=self.seo.description,
                noindex=self.seo.noindex,
            ),
            state=self.state,
        )


def error_message(error: Mapping[str, Any]) -> str:
    """Return the message a validator raised, without pydantic's prefix."""
    ctx = error.get("ctx") or {}
    if "error" in ctx:
        return str(ctx["error"])
    return str(error["msg"])


def _first_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    loc = error["loc"]
    message = error_message(error)
    if len(loc) > 1 and loc[0] == "pages" and isinstance(loc[1], int):
        return f"Page {loc[1] + 1}: {message}"
    return message


def validate_site_content(data: Any) -> SiteContent:
    """Validate untrusted input and return a SiteContent aggregate.

    Args:
        data: Decoded content, normally a dict read from JSON or YAML.

    Returns:
        The validated aggregate.

    Raises:
        ContentValidationError: At the first violation, in check order.
    """
    try:
        model = SiteContentModel.model_validate(data)
    except ValidationError as exc:
        raise ContentValidationError(_first_error(exc)) from None
    return model.to_content()


def is_valid_site_content(data: Any) -> bool:
    """Return True if ``data`` passes validation. Never raises."""
    try:
        validate_site_content(data)
    except ContentValidationError:
        return False
    return True
