"""
Shared fixtures: an in-memory catalog seeded with a small Los Angeles area
price set, plus geocoding test doubles.

Distances from Beverly Hills (90210):
    Santa Monica ~6 mi, Pasadena ~15 mi, San Diego ~110 mi.
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from carecompare.core.constants import DEFAULT_FALLBACK_POSTAL_CODES
from carecompare.database import Base

# Import models so Base.metadata is populated for create_all.
from carecompare.models import (
    Location,
    ProcedureCategory,
    ProcedurePrice,
    ProcedureTemplate,
    Provider,
)
from carecompare.services.geocoding.geocoder import Geocoder
from carecompare.services.geocoding.mock_provider import MockGeocodingProvider
from carecompare.services.search.config import SearchConfig

BEVERLY_HILLS = (34.0736, -118.4004)


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(db_engine) -> Session:
    SessionLocal = sessionmaker(bind=db_engine, expire_on_commit=False, future=True)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def _provider(id_, name, bio=None, subscription_status="ACTIVE") -> Provider:
    return Provider(
        id=id_, organization_name=name, bio=bio, subscription_status=subscription_status
    )


def _location(id_, provider, name, city, zip_code, lat, lng, active=True) -> Location:
    return Location(
        id=id_,
        provider_id=provider.id,
        name=name,
        address1=f"1 {name} Way",
        city=city,
        state="CA",
        zip_code=zip_code,
        latitude=lat,
        longitude=lng,
        is_active=active,
    )


def seed_catalog(session: Session) -> SimpleNamespace:
    imaging = ProcedureCategory(id="cat-imaging", name="Imaging", slug="imaging")
    lab = ProcedureCategory(id="cat-lab", name="Laboratory", slug="laboratory")

    mri = ProcedureTemplate(
        id="tmpl-mri",
        name="MRI Brain",
        description="MRI of the brain without contrast",
        category_id=imaging.id,
        cpt_code="70551",
        search_terms="magnetic resonance head scan",
    )
    ct = ProcedureTemplate(
        id="tmpl-ct", name="CT Chest", description="Chest CT", category_id=imaging.id
    )
    lipid = ProcedureTemplate(
        id="tmpl-lipid",
        name="Lipid Panel",
        description="Blood test",
        category_id=lab.id,
        search_terms="cholesterol",
    )
    retired = ProcedureTemplate(
        id="tmpl-retired",
        name="MRI Retired Protocol",
        category_id=imaging.id,
        is_active=False,
    )

    beverly = _provider("prov-bh", "Beverly Imaging", bio="Advanced MRI")
    santa_monica = _provider("prov-sm", "Santa Monica Radiology")
    pasadena = _provider("prov-pas", "Pasadena Diagnostics", bio="Labs")
    san_diego = _provider("prov-sd", "San Diego Scan Center")
    unmapped = _provider("prov-un", "Unmapped Clinic")
    closed = _provider("prov-cl", "Closed Clinic")

    locations = [
        _location("loc-bh", beverly, "Beverly", "Beverly Hills", "90210", *BEVERLY_HILLS),
        _location("loc-sm", santa_monica, "Santa Monica", "Santa Monica", "90401", 34.0195, -118.4912),
        _location("loc-pas", pasadena, "Pasadena", "Pasadena", "91101", 34.1478, -118.1445),
        _location("loc-sd", san_diego, "San Diego", "San Diego", "92101", 32.7157, -117.1611),
        _location("loc-un", unmapped, "Unmapped", "Los Angeles", "90001", None, None),
        _location("loc-cl", closed, "Closed", "Los Angeles", "90002", 34.07, -118.40, active=False),
    ]

    prices = [
        ProcedurePrice(id="p-mri-bh", location_id="loc-bh", template_id=mri.id, price=1200.0),
        ProcedurePrice(id="p-mri-sm", location_id="loc-sm", template_id=mri.id, price=800.0),
        ProcedurePrice(id="p-mri-pas", location_id="loc-pas", template_id=mri.id, price=950.0),
        ProcedurePrice(id="p-mri-sd", location_id="loc-sd", template_id=mri.id, price=400.0),
        ProcedurePrice(id="p-mri-un", location_id="loc-un", template_id=mri.id, price=600.0),
        ProcedurePrice(id="p-mri-cl", location_id="loc-cl", template_id=mri.id, price=300.0),
        ProcedurePrice(
            id="p-mri-old", location_id="loc-pas", template_id=mri.id, price=100.0, is_active=False
        ),
        ProcedurePrice(id="p-ct-bh", location_id="loc-bh", template_id=ct.id, price=500.0),
        ProcedurePrice(id="p-ct-sm", location_id="loc-sm", template_id=ct.id, price=450.0),
        ProcedurePrice(id="p-lipid-pas", location_id="loc-pas", template_id=lipid.id, price=40.0),
        ProcedurePrice(
            id="p-retired-bh", location_id="loc-bh", template_id=retired.id, price=999.0
        ),
    ]

    session.add_all([imaging, lab, mri, ct, lipid, retired])
    session.add_all([beverly, santa_monica, pasadena, san_diego, unmapped, closed])
    session.flush()
    session.add_all(locations)
    session.flush()
    session.add_all(prices)
    session.commit()

    return SimpleNamespace(
        mri=mri,
        ct=ct,
        lipid=lipid,
        retired=retired,
        imaging=imaging,
        lab=lab,
    )


@pytest.fixture
def catalog(db):
    return seed_catalog(db)


@pytest.fixture
def search_config() -> SearchConfig:
    return SearchConfig(
        default_radius_miles=50.0,
        default_page_size=20,
        max_page_size=100,
        fallback_postal_codes=dict(DEFAULT_FALLBACK_POSTAL_CODES),
    )


@pytest.fixture
def mock_provider() -> MockGeocodingProvider:
    return MockGeocodingProvider(locations={"Beverly Hills, CA": BEVERLY_HILLS})


@pytest.fixture
def geocoder(mock_provider, search_config) -> Geocoder:
    return Geocoder(
        mock_provider,
        fallback_postal_codes=search_config.fallback_postal_codes,
        timeout_seconds=1.0,
    )
