# backend/carecompare/models/pricing.py
from __future__ import annotations

"""Published procedure prices (one row per location and template)."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship
import ulid

from ..database import Base


class ProcedurePrice(Base):
    __tablename__ = "procedure_prices"
    __table_args__ = (CheckConstraint("price > 0", name="ck_procedure_prices_positive"),)

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    location_id = Column(String(26), ForeignKey("locations.id"), nullable=False, index=True)
    template_id = Column(
        String(26), ForeignKey("procedure_templates.id"), nullable=False, index=True
    )
    # USD
    price = Column(Float, nullable=False)
    comments = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    location = relationship("Location", back_populates="prices")
    template = relationship("ProcedureTemplate", back_populates="prices")

    def __repr__(self) -> str:
        return f"<ProcedurePrice {self.template_id}@{self.location_id} ${self.price}>"
