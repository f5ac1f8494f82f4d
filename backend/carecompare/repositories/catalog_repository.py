# backend/carecompare/repositories/catalog_repository.py
"""
Repository for procedure catalog data access.

Templates and categories are owned by provider-admin tooling; every query
here is read-only and limited to active templates.
"""

import logging
from typing import List, Optional, cast

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.catalog import ProcedureTemplate

logger = logging.getLogger(__name__)


class CatalogRepository:
    """Repository for ProcedureTemplate lookups."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_active_templates(
        self,
        text: Optional[str] = None,
        category_id: Optional[str] = None,
    ) -> List[ProcedureTemplate]:
        """
        Active templates matching an optional text term and category.

        Args:
            text: Lower-cased term; matched by containment against name,
                description and search terms
            category_id: Exact category id

        Returns:
            Matching templates ordered by name (empty list when nothing matches)
        """
        try:
            query = self.db.query(ProcedureTemplate).filter(ProcedureTemplate.is_active.is_(True))
            if category_id:
                query = query.filter(ProcedureTemplate.category_id == category_id)
            if text:
                query = query.filter(
                    or_(
                        func.lower(ProcedureTemplate.name).contains(text, autoescape=True),
                        func.lower(func.coalesce(ProcedureTemplate.description, "")).contains(
                            text, autoescape=True
                        ),
                        func.lower(func.coalesce(ProcedureTemplate.search_terms, "")).contains(
                            text, autoescape=True
                        ),
                    )
                )
            return cast(List[ProcedureTemplate], query.order_by(ProcedureTemplate.name).all())
        except SQLAlchemyError as e:
            logger.error("Error finding active templates: %s", e)
            raise RepositoryException(f"Failed to retrieve procedure templates: {str(e)}")

    def get_template(self, template_id: str) -> Optional[ProcedureTemplate]:
        """Look up a template with its category eagerly loaded."""
        try:
            return cast(
                Optional[ProcedureTemplate],
                self.db.query(ProcedureTemplate)
                .options(joinedload(ProcedureTemplate.category))
                .filter(ProcedureTemplate.id == template_id)
                .first(),
            )
        except SQLAlchemyError as e:
            logger.error("Error getting template %s: %s", template_id, e)
            raise RepositoryException(f"Failed to retrieve procedure template: {str(e)}")
