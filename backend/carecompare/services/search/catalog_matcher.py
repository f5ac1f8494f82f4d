# backend/carecompare/services/search/catalog_matcher.py
"""
Catalog matching: which procedure templates a search is about.

Text matching is plain case-insensitive containment against the template
name, description and search terms; there is no relevance scoring.
"""
from __future__ import annotations

import logging
from typing import Optional, Set

from carecompare.repositories.catalog_repository import CatalogRepository

logger = logging.getLogger(__name__)


def normalize_term(value: Optional[str]) -> Optional[str]:
    """Trim and lower-case a free-text term; blank input becomes None."""
    if value is None:
        return None
    term = " ".join(value.split()).lower()
    return term or None


class CatalogMatcher:
    def __init__(self, repository: CatalogRepository) -> None:
        self.repository = repository

    def match_templates(
        self,
        query: Optional[str] = None,
        category_id: Optional[str] = None,
    ) -> Set[str]:
        """
        Ids of active templates matching the query and category.

        With neither filter every active template matches. Both filters
        combine with AND. An empty set is a valid "no results" outcome.
        """
        term = normalize_term(query)
        category = (category_id or "").strip() or None
        templates = self.repository.find_active_templates(text=term, category_id=category)
        matched = {template.id for template in templates}
        logger.debug(
            "Catalog match term=%r category=%r -> %d templates", term, category, len(matched)
        )
        return matched
