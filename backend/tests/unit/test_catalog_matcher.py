from unittest.mock import Mock

import pytest

from carecompare.repositories import CatalogRepository, PriceRepository
from carecompare.services.search.catalog_matcher import CatalogMatcher, normalize_term
from carecompare.services.search.retriever import CandidateRetriever, SearchCandidate


@pytest.mark.parametrize(
    "raw,expected",
    [(None, None), ("", None), ("   ", None), ("  MRI   Brain ", "mri brain")],
)
def test_normalize_term(raw, expected):
    assert normalize_term(raw) == expected


class TestCatalogMatcher:
    def test_matches_by_text(self, db, catalog):
        matcher = CatalogMatcher(CatalogRepository(db))
        assert matcher.match_templates("  MRI ") == {"tmpl-mri"}

    def test_no_filters_match_every_active_template(self, db, catalog):
        matcher = CatalogMatcher(CatalogRepository(db))
        assert matcher.match_templates() == {"tmpl-mri", "tmpl-ct", "tmpl-lipid"}

    def test_unknown_procedure_is_empty_set(self, db, catalog):
        matcher = CatalogMatcher(CatalogRepository(db))
        assert matcher.match_templates("nonexistent-procedure-xyz") == set()

    def test_passes_normalized_filters_to_repository(self):
        repository = Mock()
        repository.find_active_templates.return_value = []
        CatalogMatcher(repository).match_templates("  Knee  X-Ray ", " cat-imaging ")
        repository.find_active_templates.assert_called_once_with(
            text="knee x-ray", category_id="cat-imaging"
        )


class TestCandidateRetriever:
    def test_builds_candidates(self, db, catalog):
        candidates = CandidateRetriever(PriceRepository(db)).fetch_candidates({"tmpl-ct"})
        assert sorted(c.id for c in candidates) == ["p-ct-bh", "p-ct-sm"]
        assert all(isinstance(c, SearchCandidate) for c in candidates)
        assert all(c.distance is None for c in candidates)

    def test_candidate_without_coordinates(self, db, catalog):
        candidates = CandidateRetriever(PriceRepository(db)).fetch_candidates(
            ["tmpl-mri"], location_id="loc-un"
        )
        (candidate,) = candidates
        assert candidate.coordinates is None
        assert candidate.address == "1 Unmapped Way, Los Angeles, CA 90001"

    def test_empty_template_ids_never_touch_repository(self):
        repository = Mock()
        assert CandidateRetriever(repository).fetch_candidates(set()) == []
        repository.find_active_price_records.assert_not_called()

    def test_template_ids_are_deduplicated(self):
        repository = Mock()
        repository.find_active_price_records.return_value = []
        CandidateRetriever(repository).fetch_candidates(["b", "a", "b"], provider_id="prov")
        repository.find_active_price_records.assert_called_once_with(
            ["a", "b"], location_id=None, provider_id="prov"
        )
