"""
Translate unique-constraint violations into the field that caused them.

Drivers report these differently:
- PostgreSQL: constraint name plus a `Key (cols)=(values) already exists.` detail
- SQLite: `UNIQUE constraint failed: table.col[, table.col]`
"""
import re
from dataclasses import dataclass
from typing import Iterable

from sqlalchemy.exc import IntegrityError

from fabric_catalog.schemas.fabric import VariantSubmission

UNIQUE_VIOLATION = "23505"

_DETAIL_RE = re.compile(r"Key \((?P<columns>[^)]*)\)=\((?P<values>.*)\) already exists")

# Checked in order; variant code first since its constraint also spans fabric_id
_FIELD_PATTERNS = [
    ("variantCode", re.compile(r"variant_code|unique_variant_per_fabric")),
    ("externalId", re.compile(r"external_id")),
    ("name", re.compile(r"fabrics\.name|\(name\)|fabrics_name_key|name_idx")),
]


@dataclass
class UniqueConflict:
    field: str
    value: str | None = None


def _driver_text(exc: IntegrityError) -> tuple[str, str | None]:
    """Collect the driver's message, constraint name and detail as one string."""
    orig = getattr(exc, "orig", None) or exc
    parts = [str(orig)]
    sqlstate = None

    for source in (orig, getattr(orig, "__cause__", None)):
        if source is None:
            continue
        sqlstate = sqlstate or getattr(source, "sqlstate", None) or getattr(source, "pgcode", None)
        for attr in ("constraint_name", "detail"):
            value = getattr(source, attr, None)
            if value:
                parts.append(str(value))
        diag = getattr(source, "diag", None)
        if diag is not None:
            parts.extend(str(v) for v in (diag.constraint_name, diag.message_detail) if v)

    return "\n".join(parts), sqlstate


def classify_integrity_error(exc: IntegrityError) -> UniqueConflict | None:
    """Return which unique field was violated, or None for other integrity errors."""
    text, sqlstate = _driver_text(exc)

    is_unique = (
        sqlstate == UNIQUE_VIOLATION
        or "duplicate key" in text.lower()
        or "unique constraint" in text.lower()
    )
    if not is_unique:
        return None

    value = None
    match = _DETAIL_RE.search(text)
    if match:
        # For composite keys the last value is the one the user typed; it may contain ", "
        n_cols = len(match.group("columns").split(", "))
        value = match.group("values").split(", ", n_cols - 1)[-1]

    for field, pattern in _FIELD_PATTERNS:
        if pattern.search(text):
            return UniqueConflict(field=field, value=value)

    return UniqueConflict(field="unknown", value=value)


def find_duplicate_code(variants: Iterable[VariantSubmission]) -> str | None:
    """First variant code that appears more than once in a submission."""
    seen = set()
    for variant in variants:
        if variant.variant_code in seen:
            return variant.variant_code
        seen.add(variant.variant_code)
    return None
