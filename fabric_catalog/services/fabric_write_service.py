"""
Fabric Write Service - create, update and delete fabrics with their variants.

Every operation runs in a single transaction and reports its outcome as an
OperationResult; persistence exceptions never leave this module.
"""
import logging
from typing import Any, Awaitable, Callable

from sqlalchemy import String, cast, delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from fabric_catalog.db.database import Database, db
from fabric_catalog.errors import ErrorType
from fabric_catalog.exceptions import FabricInsertError
from fabric_catalog.models import Fabric, FabricVariant
from fabric_catalog.schemas.fabric import (
    VariantSubmission,
    validate_core_update,
    validate_fabric,
    validate_variant_list,
)
from fabric_catalog.schemas.result import OperationResult
from fabric_catalog.services.conflicts import (
    UniqueConflict,
    classify_integrity_error,
    find_duplicate_code,
)
from fabric_catalog.services.variant_reconciler import UnknownVariantError, plan_variant_changes

logger = logging.getLogger(__name__)

ChangeListener = Callable[[], Awaitable[None]]

_PARKED_CODE_PREFIX = "__parked__"


def _variant_row(variant: VariantSubmission, fabric_id: int) -> dict[str, Any]:
    return {
        "fabric_id": fabric_id,
        "variant_code": variant.variant_code,
        "variant_name": variant.variant_name,
        "variant_image": variant.variant_image,
        "stock_quantity": int(variant.stock_quantity),
        "hex_color_code": variant.hex_color_code,
    }


class FabricWriteService:
    """Writes fabrics and reconciles their variants inside one transaction."""

    def __init__(self, database: Database, on_change: ChangeListener | None = None):
        self.database = database
        self.on_change = on_change

    async def _notify(self):
        """Tell list views the catalog changed. Runs only after a commit."""
        if self.on_change is None:
            return
        try:
            await self.on_change()
        except Exception:
            logger.exception("Catalog change listener failed")

    async def create_fabric(self, payload: Any) -> OperationResult:
        validation = validate_fabric(payload)
        if not validation.ok:
            logger.warning(f"Fabric validation failed: {validation.errors}")
            return OperationResult.fail(
                ErrorType.VALIDATION,
                "Validation failed. Please check the form data.",
                errors=validation.errors,
            )

        submission = validation.data

        try:
            async with self.database.session() as session, session.begin():
                fabric = Fabric(**submission.core_columns())
                session.add(fabric)
                await session.flush()

                if not fabric.id:
                    raise FabricInsertError("Failed to retrieve new fabric ID after insertion.")

                session.add_all(
                    FabricVariant(**_variant_row(v, fabric.id)) for v in submission.variants
                )
                await session.flush()
                fabric_id = fabric.id

        except IntegrityError as e:
            conflict = classify_integrity_error(e)
            if conflict is None:
                logger.exception("Integrity error while creating fabric")
                return OperationResult.fail(
                    ErrorType.DATABASE_ERROR,
                    "Failed to create fabric due to a database error.",
                )
            logger.warning(f"Create rejected, duplicate {conflict.field}: {conflict.value}")
            return self._conflict_result(
                conflict,
                external_id=submission.external_id,
                name=submission.name,
                variants=submission.variants,
                creating=True,
            )
        except (FabricInsertError, SQLAlchemyError):
            logger.exception("Database transaction error while creating fabric")
            return OperationResult.fail(
                ErrorType.DATABASE_ERROR,
                "Failed to create fabric due to a database error.",
            )

        logger.info(
            f"Created fabric {fabric_id} ({submission.external_id}) "
            f"with {len(submission.variants)} variants"
        )
        await self._notify()
        return OperationResult.ok(
            f"Successfully created Fabric: {submission.name} ({submission.external_id}) "
            f"with {len(submission.variants)} variants.",
            fabric_id=fabric_id,
        )

    async def update_fabric(self, fabric_id: int, payload: Any) -> OperationResult:
        """Update core columns and, when `variants` is sent, replace the variant set.

        A payload without a `variants` key never touches variants. With one,
        the list is the complete desired set for the fabric.
        """
        core = validate_core_update(payload)
        errors = dict(core.errors or {})

        variants = None
        if isinstance(payload, dict) and "variants" in payload:
            variant_validation = validate_variant_list(payload["variants"])
            if variant_validation.ok:
                variants = variant_validation.data
            else:
                errors.update(variant_validation.errors)

        if errors:
            logger.warning(f"Fabric {fabric_id} update validation failed: {errors}")
            return OperationResult.fail(
                ErrorType.VALIDATION,
                "Validation failed on core fields. Please check the form data.",
                errors=errors,
            )

        columns = core.data.core_columns()

        try:
            async with self.database.session() as session, session.begin():
                exists = await session.scalar(select(Fabric.id).where(Fabric.id == fabric_id))
                if exists is None:
                    return OperationResult.fail(ErrorType.NOT_FOUND, "Fabric not found.")

                await session.execute(
                    update(Fabric)
                    .where(Fabric.id == fabric_id)
                    .values(**columns, updated_at=func.now())
                )

                if variants is not None:
                    await self._apply_variants(session, fabric_id, variants)

        except UnknownVariantError as e:
            logger.warning(f"Fabric {fabric_id} update referenced foreign variants {e.ids}")
            ids = ", ".join(str(i) for i in e.ids)
            return OperationResult.fail(
                ErrorType.NOT_FOUND,
                f"Variant(s) {ids} do not belong to this fabric.",
            )
        except IntegrityError as e:
            conflict = classify_integrity_error(e)
            if conflict is None:
                logger.exception(f"Integrity error while updating fabric {fabric_id}")
                return OperationResult.fail(
                    ErrorType.DATABASE_ERROR,
                    "Failed to update fabric due to a database error.",
                )
            logger.warning(f"Update of fabric {fabric_id} rejected, duplicate {conflict.field}: {conflict.value}")
            return self._conflict_result(
                conflict,
                external_id=columns.get("external_id"),
                name=columns.get("name"),
                variants=variants or [],
                creating=False,
            )
        except SQLAlchemyError:
            logger.exception(f"Database transaction error while updating fabric {fabric_id}")
            return OperationResult.fail(
                ErrorType.DATABASE_ERROR,
                "Failed to update fabric due to a database error.",
            )

        logger.info(
            f"Updated fabric {fabric_id}: columns={sorted(columns)}, "
            f"variants={'unchanged' if variants is None else len(variants)}"
        )
        await self._notify()
        return OperationResult.ok(
            f"Successfully updated Fabric: {columns.get('name') or 'Details'}.",
            fabric_id=fabric_id,
        )

    async def _apply_variants(self, session, fabric_id: int, variants: list[VariantSubmission]):
        result = await session.execute(
            select(FabricVariant.id).where(FabricVariant.fabric_id == fabric_id)
        )
        plan = plan_variant_changes(result.scalars().all(), variants)

        # Deletes go first so a new variant can reuse a removed variant's code
        if plan.to_delete:
            await session.execute(
                delete(FabricVariant).where(
                    FabricVariant.fabric_id == fabric_id,
                    FabricVariant.id.in_(plan.to_delete),
                )
            )

        if plan.to_update:
            # Park kept variants on placeholder codes so two of them can swap codes
            await session.execute(
                update(FabricVariant)
                .where(
                    FabricVariant.fabric_id == fabric_id,
                    FabricVariant.id.in_([v.id for v in plan.to_update]),
                )
                .values(variant_code=_PARKED_CODE_PREFIX + cast(FabricVariant.id, String))
                .execution_options(synchronize_session=False)
            )

        for variant in plan.to_update:
            row = _variant_row(variant, fabric_id)
            del row["fabric_id"]
            await session.execute(
                update(FabricVariant)
                .where(FabricVariant.id == variant.id, FabricVariant.fabric_id == fabric_id)
                .values(**row)
            )

        if plan.to_insert:
            await session.execute(
                insert(FabricVariant),
                [_variant_row(v, fabric_id) for v in plan.to_insert],
            )

    async def delete_fabric(self, fabric_id: int) -> OperationResult:
        """Delete a fabric; the foreign key cascade removes its variants."""
        try:
            async with self.database.session() as session, session.begin():
                result = await session.execute(delete(Fabric).where(Fabric.id == fabric_id))
                if result.rowcount == 0:
                    return OperationResult.fail(ErrorType.NOT_FOUND, "Fabric not found.")
        except SQLAlchemyError:
            logger.exception(f"Delete error for fabric {fabric_id}")
            return OperationResult.fail(ErrorType.DATABASE_ERROR, "Failed to delete fabric.")

        logger.info(f"Deleted fabric {fabric_id}")
        await self._notify()
        return OperationResult.ok("Fabric successfully deleted.", fabric_id=fabric_id)

    def _conflict_result(
        self,
        conflict: UniqueConflict,
        external_id: str | None,
        name: str | None,
        variants: list[VariantSubmission],
        creating: bool,
    ) -> OperationResult:
        if conflict.field == "variantCode":
            code = conflict.value or find_duplicate_code(variants) or "an existing variant code"
            if creating:
                message = f"Variant code '{code}' is used more than once in this fabric."
            else:
                message = (
                    f"Failed to update: Variant code '{code}' is already used "
                    f"by another variant in this fabric."
                )
        elif conflict.field == "externalId":
            message = f"A fabric with the External ID '{conflict.value or external_id}' already exists."
        elif conflict.field == "name":
            message = f"A fabric named '{conflict.value or name}' already exists."
        else:
            message = "A record with the same unique value already exists."

        return OperationResult.fail(ErrorType.CONFLICT, message, conflict=conflict.field)


async def log_catalog_change():
    """Default change listener for the served app.

    List views fetch `GET /api/v1/fabrics` again after a successful write, so
    the app only records that the catalog moved.
    """
    logger.info("Fabric catalog changed; list views should refresh")


fabric_write_service = FabricWriteService(db, on_change=log_catalog_change)
