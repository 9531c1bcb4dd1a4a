from sqlalchemy import Column, Integer, Text, Boolean, DateTime, func
from sqlalchemy.orm import relationship
from fabric_catalog.db.database import Base


class Fabric(Base):
    __tablename__ = "fabrics"
    # Ids of deleted rows are never handed out again
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    external_id = Column(Text, nullable=False, unique=True)
    name = Column(Text, nullable=False, unique=True)
    base_image = Column(Text, nullable=False)
    composition = Column(Text, nullable=False)

    width_cm = Column(Integer, nullable=False)
    weight_gsm = Column(Integer, nullable=False)

    is_normal = Column(Boolean, nullable=False, default=False, server_default="false")
    is_sensitive_clean = Column(Boolean, nullable=False, default=False, server_default="false")
    is_dry_clean = Column(Boolean, nullable=False, default=False, server_default="false")
    is_semi_transparant = Column(Boolean, nullable=False, default=False, server_default="false")
    is_transparent = Column(Boolean, nullable=False, default=False, server_default="false")
    is_drapery = Column(Boolean, nullable=False, default=False, server_default="false")
    is_blackout = Column(Boolean, nullable=False, default=False, server_default="false")
    has_leadband = Column(Boolean, nullable=False, default=False, server_default="false")

    is_plain_knit = Column(Boolean, nullable=False, default=False, server_default="false")
    is_jacquard_knit = Column(Boolean, nullable=False, default=False, server_default="false")
    is_plain_tulle = Column(Boolean, nullable=False, default=False, server_default="false")
    is_jacquard_tulle = Column(Boolean, nullable=False, default=False, server_default="false")
    is_plain_base = Column(Boolean, nullable=False, default=False, server_default="false")
    is_jacquard_base = Column(Boolean, nullable=False, default=False, server_default="false")
    is_knit = Column(Boolean, nullable=False, default=False, server_default="false")

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    variants = relationship(
        "FabricVariant",
        back_populates="fabric",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="FabricVariant.variant_code",
    )

    def __repr__(self):
        return f"<Fabric(id={self.id}, external_id='{self.external_id}', name='{self.name}')>"
