"""Pytest fixtures for testing"""

import pytest
from dataclasses import replace
from decimal import Decimal
from typing import Generator, List
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from quantum_rates.api.main import create_app
from quantum_rates.api.dependencies import get_tier_store
from quantum_rates.infrastructure.database.models import Base
from quantum_rates.infrastructure.database.session import get_db
from quantum_rates.domain.exceptions import RepositoryError
from quantum_rates.domain.models import RateTier
from quantum_rates.domain.tier_store import TierStore


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeTierRepository:
    """In-memory stand-in for RateTierClient"""

    def __init__(self, tiers: List[RateTier] | None = None):
        self.records = {t.id: replace(t) for t in tiers or []}
        self.next_id = max(self.records, default=0) + 1
        self.fail_with: Exception | None = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def list_tiers(self) -> List[RateTier]:
        self._check()
        return [replace(t) for t in self.records.values()]

    async def create_tier(self, tier: RateTier) -> RateTier:
        self._check()
        created = replace(tier, id=self.next_id)
        self.next_id += 1
        self.records[created.id] = created
        return replace(created)

    async def update_tier(self, tier_id: int, tier: RateTier) -> None:
        self._check()
        if tier_id not in self.records:
            raise RepositoryError("Rate tier API error: 404", status_code=404)
        self.records[tier_id] = replace(tier, id=tier_id)

    async def delete_tier(self, tier_id: int) -> None:
        self._check()
        if tier_id not in self.records:
            raise RepositoryError("Rate tier API error: 404", status_code=404)
        del self.records[tier_id]


@pytest.fixture
def sample_tiers() -> List[RateTier]:
    """Two tiers sharing the 30-89 day band, split at $1000 (second one unbounded)"""
    return [
        RateTier(id=1, amount_from=Decimal("0"), amount_to=Decimal("1000"), term_from=30, term_to=89, rate=Decimal("5")),
        RateTier(id=2, amount_from=Decimal("1000"), amount_to=None, term_from=30, term_to=89, rate=Decimal("6")),
    ]


@pytest.fixture
def fake_repository(sample_tiers: List[RateTier]) -> FakeTierRepository:
    return FakeTierRepository(sample_tiers)


@pytest.fixture
async def store(fake_repository: FakeTierRepository) -> TierStore:
    """Tier store loaded with the sample tiers"""
    tier_store = TierStore(fake_repository)
    await tier_store.refresh()
    return tier_store


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session, fake_repository: FakeTierRepository) -> TestClient:
    """Create FastAPI test client with test database and in-memory tier repository"""
    app = create_app()
    tier_store = TierStore(fake_repository)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_tier_store] = lambda: tier_store
    return TestClient(app)
