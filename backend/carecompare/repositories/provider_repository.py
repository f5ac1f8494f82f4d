# backend/carecompare/repositories/provider_repository.py
"""Repository for the provider directory search."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.constants import ACTIVE_SUBSCRIPTION_STATUS
from ..core.exceptions import RepositoryException
from ..models.provider import Location, Provider

logger = logging.getLogger(__name__)


class ProviderRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def find_active_providers(self, text: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Subscribed providers with at least one active location, each with its
        active locations.

        Args:
            text: Lower-cased term matched by containment against
                organization name and bio
        """
        try:
            query = (
                self.db.query(Provider, Location)
                .join(Location, Location.provider_id == Provider.id)
                .filter(
                    Location.is_active.is_(True),
                    Provider.subscription_status == ACTIVE_SUBSCRIPTION_STATUS,
                )
            )
            if text:
                query = query.filter(
                    or_(
                        func.lower(Provider.organization_name).contains(text, autoescape=True),
                        func.lower(func.coalesce(Provider.bio, "")).contains(
                            text, autoescape=True
                        ),
                    )
                )
            rows = query.order_by(Provider.organization_name, Provider.id, Location.name).all()
        except SQLAlchemyError as e:
            logger.error("Error finding active providers: %s", e)
            raise RepositoryException(f"Failed to retrieve providers: {str(e)}")

        providers: Dict[str, Dict[str, Any]] = {}
        for provider, location in rows:
            entry = providers.get(provider.id)
            if entry is None:
                entry = {
                    "id": provider.id,
                    "name": provider.organization_name,
                    "bio": provider.bio,
                    "logo_url": provider.logo_url,
                    "website": provider.website,
                    "locations": [],
                }
                providers[provider.id] = entry
            entry["locations"].append(
                {
                    "id": location.id,
                    "name": location.name,
                    "address1": location.address1,
                    "city": location.city,
                    "state": location.state,
                    "zip_code": location.zip_code,
                    "latitude": location.latitude,
                    "longitude": location.longitude,
                }
            )
        return list(providers.values())
