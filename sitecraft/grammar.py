"""Layout grammar for sitecraft.

A page layout is a sequence of sections. Each section has a declaration
(its rhetorical role), a grid pattern and a list of typed slots. The
declaration decides which grids and slot types the section may use:

    decl  grids          slots
    a     a              primary, secondary
    b     b, b-mirror    primary, secondary, meta
    c     b, b-mirror    secondary, list, quote, meta
    d     a              primary
    e     a              secondary, meta

Whole-layout rule: declaration d is only allowed in layouts with at
least five sections.

Unlike content validation, layout validation collects every violation
instead of stopping at the first one. The raw mapping form is parsed by
pydantic models (LayoutModel, SectionModel, SlotModel), and every error
pydantic reports is kept.

Key functions:
- validate_section: Check one section against its declaration's rules.
- validate_page_layout: Check a whole layout.
- layout_from_dict: Parse the raw mapping form of a layout.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from .errors import LayoutValidationError
from .schema import error_message, require_mapping
from .tokens import DeclarationType, GridPattern, SlotType

MIN_SECTIONS_FOR_EMPHASIS = 5


@dataclass(frozen=True)
class DeclarationRule:
    """Allowed grids and slots for one declaration.

    Attributes:
        purpose: Human-readable rhetorical role.
        allowed_grids: Grid patterns the declaration may use.
        allowed_slots: Slot types the declaration may contain.
    """

    purpose: str
    allowed_grids: tuple[GridPattern, ...]
    allowed_slots: tuple[SlotType, ...]


DECLARATION_RULES: dict[DeclarationType, DeclarationRule] = {
    DeclarationType.FOCUS_OPENING: DeclarationRule(
        purpose="Focus Opening",
        allowed_grids=(GridPattern.CENTERED,),
        allowed_slots=(SlotType.PRIMARY, SlotType.SECONDARY),
    ),
    DeclarationType.EXPLANATION: DeclarationRule(
        purpose="Explanation / Context",
        allowed_grids=(GridPattern.TWO_COLUMN, GridPattern.TWO_COLUMN_MIRRORED),
        allowed_slots=(SlotType.PRIMARY, SlotType.SECONDARY, SlotType.META),
    ),
    DeclarationType.ENUMERATION: DeclarationRule(
        purpose="Enumeration / Structure",
        allowed_grids=(GridPattern.TWO_COLUMN, GridPattern.TWO_COLUMN_MIRRORED),
        allowed_slots=(SlotType.SECONDARY, SlotType.LIST, SlotType.QUOTE, SlotType.META),
    ),
    DeclarationType.EMPHASIS: DeclarationRule(
        purpose="Emphasis / Decision",
        allowed_grids=(GridPattern.CENTERED,),
        allowed_slots=(SlotType.PRIMARY,),
    ),
    DeclarationType.CLOSURE: DeclarationRule(
        purpose="Closure / Context End",
        allowed_grids=(GridPattern.CENTERED,),
        allowed_slots=(SlotType.SECONDARY, SlotType.META),
    ),
}


@dataclass(frozen=True)
class Slot:
    """A typed piece of section content.

    Plain strings such as ``"primary"`` are accepted and converted to
    SlotType; unknown values raise ValueError.
    """

    type: SlotType
    content: str

    def __post_init__(self):
        object.__setattr__(self, "type", SlotType(self.type))


@dataclass(frozen=True)
class Section:
    """A layout section. ``decl`` and ``grid`` accept their wire values."""

    decl: DeclarationType
    grid: GridPattern
    slots: tuple[Slot, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "decl", DeclarationType(self.decl))
        object.__setattr__(self, "grid", GridPattern(self.grid))
        object.__setattr__(self, "slots", tuple(self.slots))


@dataclass(frozen=True)
class PageLayout:
    sections: tuple[Section, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "sections", tuple(self.sections))


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a layout validation.

    Attributes:
        valid: True when no rule was broken.
        errors: Human-readable violations, in discovery order.
    """

    valid: bool
    errors: list[str] = field(default_factory=list)


def _join(values) -> str:
    return ", ".join(value.value for value in values)


def validate_section(section: Section) -> ValidationResult:
    """Check a section's grid and slots against its declaration.

    Args:
        section: Section to check.

    Returns:
        ValidationResult listing every violation.
    """
    rule = DECLARATION_RULES[section.decl]
    errors: list[str] = []

    if section.grid not in rule.allowed_grids:
        errors.append(
            f'Declaration {section.decl.value} does not allow grid "{section.grid.value}". '
            f"Allowed: {_join(rule.allowed_grids)}"
        )

    for slot in section.slots:
        if slot.type not in rule.allowed_slots:
            errors.append(
                f'Declaration {section.decl.value} does not allow slot type "{slot.type.value}". '
                f"Allowed: {_join(rule.allowed_slots)}"
            )

    return ValidationResult(valid=not errors, errors=errors)


def validate_page_layout(layout: PageLayout) -> ValidationResult:
    """Check a whole layout, including the emphasis section-count rule.

    Args:
        layout: Layout to check.

    Returns:
        ValidationResult with the whole-layout violation (if any) first,
        followed by per-section errors prefixed with the 1-based index.
    """
    errors: list[str] = []
    count = len(layout.sections)

    has_emphasis = any(s.decl is DeclarationType.EMPHASIS for s in layout.sections)
    if has_emphasis and count < MIN_SECTIONS_FOR_EMPHASIS:
        errors.append(
            "Declaration d (Emphasis) is only allowed when the page has at least "
            f"{MIN_SECTIONS_FOR_EMPHASIS} sections. Current: {count}"
        )

    for index, section in enumerate(layout.sections, start=1):
        result = validate_section(section)
        errors.extend(f"Section {index}: {error}" for error in result.errors)

    return ValidationResult(valid=not errors, errors=errors)


def _parse_member(enum_cls, value: Any, name: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValueError(f'unknown {name} "{value}". Allowed: {_join(enum_cls)}') from None


def _require_list(value: Any, message: str) -> list[Any]:
    if not isinstance(value, (list, tuple)):
        raise ValueError(message)
    return list(value)


class _LayoutWireModel(BaseModel):
    model_config = ConfigDict(validate_default=True, extra="ignore")


class SlotModel(_LayoutWireModel):
    type: SlotType = None
    content: str = ""

    @model_validator(mode="before")
    @classmethod
    def _check_object(cls, data: Any) -> Any:
        return require_mapping(data, "slot must be an object")

    @field_validator("type", mode="before")
    @classmethod
    def _check_type(cls, value: Any) -> SlotType:
        return _parse_member(SlotType, value, "slot type")

    @field_validator("content", mode="before")
    @classmethod
    def _check_content(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("content must be a string")
        return value


class SectionModel(_LayoutWireModel):
    decl: DeclarationType = None
    grid: GridPattern = None
    slots: list[SlotModel] = None

    @model_validator(mode="before")
    @classmethod
    def _check_object(cls, data: Any) -> Any:
        return require_mapping(data, "section must be an object")

    @field_validator("decl", mode="before")
    @classmethod
    def _check_decl(cls, value: Any) -> DeclarationType:
        return _parse_member(DeclarationType, value, "decl")

    @field_validator("grid", mode="before")
    @classmethod
    def _check_grid(cls, value: Any) -> GridPattern:
        return _parse_member(GridPattern, value, "grid")

    @field_validator("slots", mode="before")
    @classmethod
    def _check_slots(cls, value: Any) -> list[Any]:
        if value is None:
            return []
        return _require_list(value, "slots must be a list")


class LayoutModel(_LayoutWireModel):
    """Wire form of a page layout."""

    sections: list[SectionModel] = None

    @model_validator(mode="before")
    @classmethod
    def _check_object(cls, data: Any) -> Any:
        return require_mapping(data, "Layout must be an object")

    @field_validator("sections", mode="before")
    @classmethod
    def _check_sections(cls, value: Any) -> list[Any]:
        return _require_list(value, "Layout sections must be a list")

    def to_layout(self) -> PageLayout:
        return PageLayout(
            sections=tuple(
                Section(
                    decl=section.decl,
                    grid=section.grid,
                    slots=tuple(Slot(type=slot.type, content=slot.content) for slot in section.slots),
                )
                for section in self.sections
            )
        )


def _error_label(loc: tuple) -> str:
    """Turn a pydantic error location into "Section 2 slot 1"."""
    parts: list[str] = []
    for key, index in zip(loc, loc[1:]):
        if not isinstance(index, int):
            continue
        if key == "sections":
            parts.append(f"Section {index + 1}")
        elif key == "slots":
            parts.append(f"slot {index + 1}")
    return " ".join(parts)


def layout_from_dict(data: Any) -> PageLayout:
    """Build a PageLayout from its raw mapping form.

    Expected shape::

        {"sections": [{"decl": "a", "grid": "a",
                       "slots": [{"type": "primary", "content": "..."}]}]}

    Args:
        data: Decoded layout mapping.

    Returns:
        The parsed layout. Grammar rules are not checked here.

    Raises:
        LayoutValidationError: Listing every malformed section or slot.
    """
    try:
        model = LayoutModel.model_validate(data)
    except ValidationError as exc:
        errors = []
        for error in exc.errors():
            label = _error_label(tuple(error["loc"]))
            message = error_message(error)
            errors.append(f"{label}: {message}" if label else message)
        raise LayoutValidationError(errors) from None
    return model.to_layout()
