"""
Diff a submitted variant list against the variants already stored for a fabric.

The submitted list is the complete desired set: persisted variants whose id is
missing from it are deleted.
"""
from dataclasses import dataclass, field
from typing import Iterable

from fabric_catalog.schemas.fabric import VariantSubmission


class UnknownVariantError(Exception):
    """A submitted variant id is not one of this fabric's persisted variants."""

    def __init__(self, ids: list[int]):
        self.ids = ids
        super().__init__(f"Unknown variant ids: {ids}")


@dataclass
class VariantPlan:
    to_insert: list[VariantSubmission] = field(default_factory=list)
    to_update: list[VariantSubmission] = field(default_factory=list)
    to_delete: list[int] = field(default_factory=list)


def plan_variant_changes(
    persisted_ids: Iterable[int],
    submitted: Iterable[VariantSubmission],
) -> VariantPlan:
    """Split a submission into inserts, updates and deletions.

    Raises:
        UnknownVariantError: if a submitted id does not belong to the fabric
    """
    persisted = set(persisted_ids)
    plan = VariantPlan()
    unknown = []

    for variant in submitted:
        if variant.id is None:
            plan.to_insert.append(variant)
        elif variant.id in persisted:
            plan.to_update.append(variant)
        else:
            unknown.append(variant.id)

    if unknown:
        raise UnknownVariantError(sorted(set(unknown)))

    keep = {v.id for v in plan.to_update}
    plan.to_delete = sorted(persisted - keep)
    return plan
