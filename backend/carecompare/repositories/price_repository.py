# backend/carecompare/repositories/price_repository.py
"""
Repository for published procedure prices.

Joins procedure_prices with locations, providers, templates and categories
so a search candidate can be built from a single row.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.catalog import ProcedureCategory, ProcedureTemplate
from ..models.pricing import ProcedurePrice
from ..models.provider import Location, Provider

logger = logging.getLogger(__name__)


class PriceRepository:
    """Read access to active price records and their join context."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_active_price_records(
        self,
        template_ids: Iterable[str],
        location_id: Optional[str] = None,
        provider_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Active prices for the given templates at active locations.

        Args:
            template_ids: Templates to include
            location_id: Restrict to a single location
            provider_id: Restrict to one provider's locations

        Returns:
            One dict per price record with location, provider, template
            and category fields flattened in
        """
        ids = list(template_ids)
        if not ids:
            return []

        try:
            query = (
                self.db.query(
                    ProcedurePrice, ProcedureTemplate, ProcedureCategory, Location, Provider
                )
                .join(ProcedureTemplate, ProcedurePrice.template_id == ProcedureTemplate.id)
                .outerjoin(ProcedureCategory, ProcedureTemplate.category_id == ProcedureCategory.id)
                .join(Location, ProcedurePrice.location_id == Location.id)
                .join(Provider, Location.provider_id == Provider.id)
                .filter(
                    ProcedurePrice.template_id.in_(ids),
                    ProcedurePrice.is_active.is_(True),
                    ProcedurePrice.price > 0,
                    ProcedureTemplate.is_active.is_(True),
                    Location.is_active.is_(True),
                )
            )
            if location_id:
                query = query.filter(ProcedurePrice.location_id == location_id)
            if provider_id:
                query = query.filter(Location.provider_id == provider_id)
            rows = query.all()
        except SQLAlchemyError as e:
            logger.error("Error finding active price records: %s", e)
            raise RepositoryException(f"Failed to retrieve procedure prices: {str(e)}")

        return [
            {
                "id": price.id,
                "price": float(price.price),
                "comments": price.comments,
                "template_id": template.id,
                "template_name": template.name,
                "template_description": template.description,
                "category_id": category.id if category else None,
                "category_name": category.name if category else None,
                "location_id": location.id,
                "location_name": location.name,
                "address1": location.address1,
                "city": location.city,
                "state": location.state,
                "zip_code": location.zip_code,
                "latitude": location.latitude,
                "longitude": location.longitude,
                "provider_id": provider.id,
                "provider_name": provider.organization_name,
                "provider_logo_url": provider.logo_url,
            }
            for price, template, category, location, provider in rows
        ]
