import asyncio
import logging

from sqlalchemy import select

from fabric_catalog.db.database import db
from fabric_catalog.models import Fabric, FabricVariant

logger = logging.getLogger(__name__)


# (external_id, name, composition, width_cm, weight_gsm, flags)
FABRICS_DATA = [
    ("TZM0151", "accent", "%100 PES", 280, 120, {"is_normal": True, "is_drapery": True, "is_plain_base": True}),
    ("TZM0207", "nocturne", "%70 PES %30 CO", 300, 310, {"is_dry_clean": True, "is_blackout": True, "has_leadband": True}),
    ("TZM0312", "voile royal", "%100 PES", 320, 45, {"is_sensitive_clean": True, "is_transparent": True, "is_plain_tulle": True}),
    ("TZM0420", "damask", "%60 PES %40 VI", 290, 180, {"is_semi_transparant": True, "is_jacquard_knit": True, "is_knit": True}),
]

# Variants per fabric: (code, name, hex)
VARIANTS_DATA = {
    "TZM0151": [("01", "Ivory", "#FFFFF0"), ("02", "Ocean Blue", "#1F6F8B"), ("03", "Sand", "#C2B280")],
    "TZM0207": [("01", "Charcoal", "#36454F"), ("02", "Bordeaux", "#5F021F")],
    "TZM0312": [("01", "Snow", "#FFFAFA")],
    "TZM0420": [("01", "Gold", "#D4AF37"), ("02", "Silver", "#C0C0C0")],
}


async def seed_database():
    # Create tables
    await db.create_tables()

    async with db.session() as session:
        # Check if data exists
        result = await session.execute(select(Fabric).limit(1))
        if result.scalar():
            logger.info("Database already seeded")
            return

        fabrics = []
        for external_id, name, composition, width_cm, weight_gsm, flags in FABRICS_DATA:
            fabric = Fabric(
                external_id=external_id,
                name=name,
                base_image=f"{name.upper().replace(' ', '_')}.jpg",
                composition=composition,
                width_cm=width_cm,
                weight_gsm=weight_gsm,
                **flags,
            )
            fabrics.append(fabric)
            session.add(fabric)

        await session.flush()  # Get IDs

        for fabric in fabrics:
            for code, variant_name, hex_code in VARIANTS_DATA.get(fabric.external_id, []):
                session.add(FabricVariant(
                    fabric_id=fabric.id,
                    variant_code=code,
                    variant_name=variant_name,
                    variant_image=f"{fabric.name.upper().replace(' ', '_')}_{code}.jpg",
                    stock_quantity=25,
                    hex_color_code=hex_code,
                ))

        await session.commit()
        logger.info("Database seeded successfully!")


async def main():
    try:
        await seed_database()
    finally:
        await db.disconnect()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
