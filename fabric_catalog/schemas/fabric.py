"""
Validation profiles for fabric submissions.

One set of field types is shared by every profile:
- full (FabricSubmission): all core fields required, at least one variant
- core (FabricCoreUpdate): every field optional but still checked when present
- variant list: a standalone list of VariantSubmission, possibly empty
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Annotated, Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel


# Shared field rules
ExternalId = Annotated[str, Field(min_length=3)]
RequiredText = Annotated[str, Field(min_length=1)]
WidthCm = Annotated[int, Field(ge=50)]
WeightGsm = Annotated[int, Field(ge=10)]
StockQuantity = Annotated[int, Field(ge=0)]

# Messages shown to staff instead of pydantic's generic ones
FIELD_MESSAGES = {
    "externalId": "External ID is required (e.g., TZM0151).",
    "name": "Fabric Name is required.",
    "baseImage": "Base Image URL is required.",
    "composition": "Composition is required (e.g., %100 PES).",
    "widthCm": "Width must be at least 50 cm.",
    "weightGsm": "Weight must be at least 10 gsm.",
    "variants": "At least one variant must be added.",
    "variantCode": "Variant Code is required.",
    "variantName": "Variant Name is required.",
    "variantImage": "Variant Image URL is required.",
    "stockQuantity": "Stock quantity cannot be negative.",
}

# Constraint failures that get the friendly message above
_TRANSLATED_ERRORS = {"missing", "string_too_short", "greater_than_equal", "too_short"}

T = TypeVar("T")


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; both accepted on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class VariantSubmission(CamelModel):
    id: int | None = None
    variant_code: RequiredText
    variant_name: RequiredText
    variant_image: RequiredText
    stock_quantity: StockQuantity = 0
    hex_color_code: str | None = None


class FabricSubmission(CamelModel):
    external_id: ExternalId
    name: RequiredText
    base_image: RequiredText
    composition: RequiredText
    width_cm: WidthCm
    weight_gsm: WeightGsm

    # Features
    is_normal: bool = False
    is_sensitive_clean: bool = False
    is_dry_clean: bool = False
    is_semi_transparant: bool = False
    is_transparent: bool = False
    is_drapery: bool = False
    is_blackout: bool = False
    has_leadband: bool = False

    # Weave/Type
    is_plain_knit: bool = False
    is_jacquard_knit: bool = False
    is_plain_tulle: bool = False
    is_jacquard_tulle: bool = False
    is_plain_base: bool = False
    is_jacquard_base: bool = False
    is_knit: bool = False

    variants: Annotated[list[VariantSubmission], Field(min_length=1)]

    def core_columns(self) -> dict[str, Any]:
        """Column values for the fabrics row."""
        return self.model_dump(exclude={"variants"})


class FabricCoreUpdate(CamelModel):
    external_id: ExternalId | None = None
    name: RequiredText | None = None
    base_image: RequiredText | None = None
    composition: RequiredText | None = None
    width_cm: WidthCm | None = None
    weight_gsm: WeightGsm | None = None

    is_normal: bool | None = None
    is_sensitive_clean: bool | None = None
    is_dry_clean: bool | None = None
    is_semi_transparant: bool | None = None
    is_transparent: bool | None = None
    is_drapery: bool | None = None
    is_blackout: bool | None = None
    has_leadband: bool | None = None

    is_plain_knit: bool | None = None
    is_jacquard_knit: bool | None = None
    is_plain_tulle: bool | None = None
    is_jacquard_tulle: bool | None = None
    is_plain_base: bool | None = None
    is_jacquard_base: bool | None = None
    is_knit: bool | None = None

    def core_columns(self) -> dict[str, Any]:
        """Only the columns the caller actually sent; never blanks the others."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


_variant_list = TypeAdapter(list[VariantSubmission])


@dataclass
class ValidationOutcome(Generic[T]):
    data: T | None = None
    errors: dict[str, list[str]] | None = None

    @property
    def ok(self) -> bool:
        return self.errors is None


def _wire_name(part: str) -> str:
    return to_camel(part) if "_" in part else part


def field_errors(exc: ValidationError, root: str | None = None) -> dict[str, list[str]]:
    """Flatten pydantic errors into {wireField: [messages]}.

    Errors inside a nested list are reported under the list's field name.
    `root` names the field when the validated value is itself a list.
    """
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        # snake_case input reports snake_case locations
        loc = [_wire_name(part) if isinstance(part, str) else part for part in error["loc"]]
        if root is not None:
            loc.insert(0, root)

        key = str(loc[0]) if loc and isinstance(loc[0], str) else "_form"
        leaf = next((part for part in reversed(loc) if isinstance(part, str)), key)

        if error["type"] in _TRANSLATED_ERRORS and leaf in FIELD_MESSAGES:
            message = FIELD_MESSAGES[leaf]
        else:
            message = error["msg"]

        messages = errors.setdefault(key, [])
        if message not in messages:
            messages.append(message)
    return errors


def validate_fabric(payload: Any) -> ValidationOutcome[FabricSubmission]:
    try:
        return ValidationOutcome(data=FabricSubmission.model_validate(payload))
    except ValidationError as e:
        return ValidationOutcome(errors=field_errors(e))


def validate_core_update(payload: Any) -> ValidationOutcome[FabricCoreUpdate]:
    try:
        return ValidationOutcome(data=FabricCoreUpdate.model_validate(payload))
    except ValidationError as e:
        return ValidationOutcome(errors=field_errors(e))


def validate_variant_list(items: Any) -> ValidationOutcome[list[VariantSubmission]]:
    try:
        return ValidationOutcome(data=_variant_list.validate_python(items))
    except ValidationError as e:
        return ValidationOutcome(errors=field_errors(e, root="variants"))


# Response models

class VariantRead(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    fabric_id: int
    variant_code: str
    variant_name: str
    variant_image: str
    stock_quantity: int
    hex_color_code: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class FabricRead(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    external_id: str
    name: str
    base_image: str
    composition: str
    width_cm: int
    weight_gsm: int

    is_normal: bool
    is_sensitive_clean: bool
    is_dry_clean: bool
    is_semi_transparant: bool
    is_transparent: bool
    is_drapery: bool
    is_blackout: bool
    has_leadband: bool

    is_plain_knit: bool
    is_jacquard_knit: bool
    is_plain_tulle: bool
    is_jacquard_tulle: bool
    is_plain_base: bool
    is_jacquard_base: bool
    is_knit: bool

    created_at: datetime | None = None
    updated_at: datetime | None = None
    variants: list[VariantRead] = []
