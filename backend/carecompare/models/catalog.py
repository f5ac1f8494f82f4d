# backend/carecompare/models/catalog.py
from __future__ import annotations

"""
Procedure catalog models.

1. ProcedureCategory - flat grouping such as Imaging or Laboratory
2. ProcedureTemplate - provider-independent procedure definition
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import relationship
import ulid

from ..database import Base


class ProcedureCategory(Base):
    """
    Model representing a procedure category.

    Attributes:
        id: Primary key (ULID)
        name: Display name (e.g., "Imaging")
        slug: URL-friendly identifier (e.g., "imaging")
        description: Optional description of the category
    """

    __tablename__ = "procedure_categories"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    name = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    templates = relationship("ProcedureTemplate", back_populates="category")

    def __repr__(self) -> str:
        return f"<ProcedureCategory {self.name} ({self.slug})>"


class ProcedureTemplate(Base):
    """
    Canonical definition of a medical procedure (e.g. "MRI Brain without contrast").

    Templates are created by provider-admin tooling; the search service only reads them.
    """

    __tablename__ = "procedure_templates"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    category_id = Column(String(26), ForeignKey("procedure_categories.id"), nullable=False)
    cpt_code = Column(String(16), nullable=True)
    search_terms = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    category = relationship("ProcedureCategory", back_populates="templates")
    prices = relationship("ProcedurePrice", back_populates="template")

    def __repr__(self) -> str:
        return f"<ProcedureTemplate {self.name}>"
