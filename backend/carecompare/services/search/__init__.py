# backend/carecompare/services/search/__init__.py
"""
Procedure-price search services.

Components (leaves first): distance, catalog_matcher, retriever, statistics,
query, ranker. Import them from their modules directly.
"""
