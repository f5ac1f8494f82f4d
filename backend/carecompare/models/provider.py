# backend/carecompare/models/provider.py
from __future__ import annotations

"""Provider organizations and the physical locations where they publish prices."""

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, String, Text, func
from sqlalchemy.orm import relationship
import ulid

from ..database import Base


class Provider(Base):
    __tablename__ = "providers"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    organization_name = Column(String, nullable=False, index=True)
    bio = Column(Text, nullable=True)
    logo_url = Column(String, nullable=True)
    website = Column(String, nullable=True)
    phone = Column(String(32), nullable=True)
    subscription_status = Column(String(32), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    locations = relationship("Location", back_populates="provider", order_by="Location.name")

    def __repr__(self) -> str:
        return f"<Provider {self.organization_name}>"


class Location(Base):
    """
    A provider's physical site.

    latitude/longitude are only present when the address was geocoded
    successfully at creation time.
    """

    __tablename__ = "locations"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    provider_id = Column(String(26), ForeignKey("providers.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    address1 = Column(String, nullable=False)
    address2 = Column(String, nullable=True)
    city = Column(String, nullable=False)
    state = Column(String(32), nullable=False)
    zip_code = Column(String(10), nullable=False)
    phone = Column(String(32), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    provider = relationship("Provider", back_populates="locations")
    prices = relationship("ProcedurePrice", back_populates="location")

    def __repr__(self) -> str:
        return f"<Location {self.name} ({self.city}, {self.state})>"
