# backend/carecompare/models/__init__.py
"""
SQLAlchemy models for the read-only catalog and price store.
"""

from .catalog import ProcedureCategory, ProcedureTemplate
from .pricing import ProcedurePrice
from .provider import Location, Provider

__all__ = [
    "ProcedureCategory",
    "ProcedureTemplate",
    "Provider",
    "Location",
    "ProcedurePrice",
]
