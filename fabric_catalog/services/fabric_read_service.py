"""Fabric Read Service - listing and single-record lookups."""
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from fabric_catalog.db.database import Database, db
from fabric_catalog.models import Fabric
from fabric_catalog.schemas.fabric import FabricRead


class FabricReadService:
    def __init__(self, database: Database):
        self.database = database

    async def list_fabrics(self) -> list[FabricRead]:
        """All fabrics, newest first, each with variants ordered by code."""
        async with self.database.session() as session:
            result = await session.execute(
                select(Fabric)
                .options(selectinload(Fabric.variants))
                .order_by(Fabric.created_at.desc(), Fabric.id.desc())
            )
            return [FabricRead.model_validate(f) for f in result.scalars().all()]

    async def get_fabric_for_edit(self, fabric_id: int) -> FabricRead | None:
        """One fabric with its variants, or None if the id does not exist."""
        async with self.database.session() as session:
            result = await session.execute(
                select(Fabric)
                .options(selectinload(Fabric.variants))
                .where(Fabric.id == fabric_id)
            )
            fabric = result.scalar_one_or_none()
            return FabricRead.model_validate(fabric) if fabric else None


fabric_read_service = FabricReadService(db)
