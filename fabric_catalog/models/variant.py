from sqlalchemy import Column, Integer, Text, ForeignKey, DateTime, UniqueConstraint, func
from sqlalchemy.orm import relationship
from fabric_catalog.db.database import Base


class FabricVariant(Base):
    __tablename__ = "fabric_variants"
    __table_args__ = (
        UniqueConstraint("fabric_id", "variant_code", name="unique_variant_per_fabric"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True)
    fabric_id = Column(Integer, ForeignKey("fabrics.id", ondelete="CASCADE"), nullable=False)
    variant_code = Column(Text, nullable=False)
    variant_name = Column(Text, nullable=False)
    variant_image = Column(Text, nullable=False)
    stock_quantity = Column(Integer, nullable=False, default=0, server_default="0")
    hex_color_code = Column(Text)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    fabric = relationship("Fabric", back_populates="variants")

    def __repr__(self):
        return f"<FabricVariant(id={self.id}, fabric_id={self.fabric_id}, code='{self.variant_code}')>"
