# Shared pytest configuration and fixtures for all test types
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from datetime import datetime, timezone, timedelta
from typing import Union

from api.main import app
from common.core.background import drain_detached_tasks
from common.db.base import Base
from common.providers.caching.passthrough_cache import PassthroughCache
from packages.accounts.models.database import (
    AccountEntity,
    LocationEntity,
    MembershipEntity,
)
from packages.accounts.models.domain.location import default_star_configs
from packages.auth.models.domain.authenticated_user import AuthenticatedUser
from packages.billing.models.database import SubscriptionEntity, UsageEventEntity  # noqa: F401
from packages.billing.models.domain.enums import (
    BillingInterval,
    PlanTier,
    SubscriptionStatus,
)
from packages.billing.services.price_catalog import PriceCatalog, get_price_catalog
from packages.invitations.models.database.invitation import InvitationEntity
from packages.users.models.database.user import UserEntity

# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PRICE_IDS = {
    (PlanTier.BASIC, BillingInterval.MONTHLY): "price_basic_monthly",
    (PlanTier.BASIC, BillingInterval.YEARLY): "price_basic_yearly",
    (PlanTier.PRO, BillingInterval.MONTHLY): "price_pro_monthly",
    (PlanTier.PRO, BillingInterval.YEARLY): "price_pro_yearly",
}


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # Account deletion relies on ON DELETE CASCADE
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine and initialize schema."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_connection(test_engine):
    """Create test connection with outer transaction for rollback isolation."""
    async with test_engine.connect() as connection:
        trans = await connection.begin()
        yield connection
        await trans.rollback()


@pytest_asyncio.fixture(scope="function")
async def test_session_factory(test_connection):
    """Create session factory bound to test connection.

    Using join_transaction_mode="create_savepoint" so nested transaction()
    calls create savepoints instead of real nested transactions.
    """
    return async_sessionmaker(
        bind=test_connection,
        class_=AsyncSession,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )


@pytest_asyncio.fixture(scope="function")
async def test_db(test_session_factory):
    """Create a test database session."""
    async with test_session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function", autouse=True)
async def patch_lazy_sessions(test_session_factory, monkeypatch):
    """
    Patch the session factory to use the test database.

    This allows real transaction() and get_session() to run with proper
    commit/rollback/ContextVar semantics while using the test database.
    """
    monkeypatch.setattr(
        "common.db.scoped.get_session_factory",
        lambda readonly=False: test_session_factory,
    )
    yield
    # Detached work must not outlive the connection it was started against
    await drain_detached_tasks()


@pytest.fixture(autouse=True)
def passthrough_cache(monkeypatch):
    """Disable caching so every test reads the database."""
    monkeypatch.setattr(
        "common.providers.caching.factory._cache_provider", PassthroughCache()
    )


@pytest.fixture
def price_catalog():
    return PriceCatalog(TEST_PRICE_IDS)


@pytest_asyncio.fixture(scope="function")
async def client(test_user, price_catalog):
    """Create a test client that authenticates as ``test_user``."""
    app.dependency_overrides[get_price_catalog] = lambda: price_catalog

    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
            headers=identity_headers(test_user),
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


def identity_headers(user: AuthenticatedUser) -> dict:
    headers = {"X-User-Id": user.user_id}
    if user.email:
        headers["X-User-Email"] = user.email
    return headers


async def _add(test_db: AsyncSession, entity):
    test_db.add(entity)
    await test_db.commit()
    await test_db.refresh(entity)
    return entity


@pytest_asyncio.fixture(scope="function")
async def user_entity(test_db: AsyncSession):
    return await _add(
        test_db, UserEntity(id="user-owner", email="owner@example.com", name="Owner")
    )


@pytest_asyncio.fixture(scope="function")
async def other_user_entity(test_db: AsyncSession):
    return await _add(
        test_db, UserEntity(id="user-other", email="Other@Example.com", name="Other")
    )


@pytest_asyncio.fixture(scope="function")
async def test_user(user_entity):
    """Create a test authenticated user."""
    return AuthenticatedUser(user_id=user_entity.id, email=user_entity.email)


@pytest_asyncio.fixture(scope="function")
async def other_user(other_user_entity):
    return AuthenticatedUser(
        user_id=other_user_entity.id, email=other_user_entity.email
    )


@pytest_asyncio.fixture(scope="function")
async def sample_account(test_db: AsyncSession, user_entity):
    """Account owned by ``test_user`` with a connected business email."""
    account = await _add(
        test_db, AccountEntity(name="Cafe Aroma", email="biz@example.com")
    )
    await _add(
        test_db,
        MembershipEntity(user_id=user_entity.id, account_id=account.id, role="owner"),
    )
    return account


@pytest_asyncio.fixture(scope="function")
async def sample_location(test_db: AsyncSession, sample_account):
    return await _add(
        test_db,
        LocationEntity(
            account_id=sample_account.id,
            name="Cafe Aroma Downtown",
            google_location_id="locations/123",
            star_configs={
                rating: config.model_dump()
                for rating, config in default_star_configs().items()
            },
        ),
    )


async def create_subscription(
    test_db: AsyncSession,
    user_id: str,
    plan_tier: PlanTier = PlanTier.PRO,
    status: Union[SubscriptionStatus, str] = SubscriptionStatus.ACTIVE,
    feature_overrides: dict = None,
) -> SubscriptionEntity:
    """Seed a subscription row as the billing sync would. ``status`` may be any text."""
    return await _add(
        test_db,
        SubscriptionEntity(
            user_id=user_id,
            plan_tier=plan_tier.value,
            status=getattr(status, "value", status),
            stripe_customer_id="cus_test123",
            stripe_subscription_id=f"sub_{user_id}",
            stripe_price_id=TEST_PRICE_IDS.get((plan_tier, BillingInterval.MONTHLY)),
            feature_overrides=feature_overrides,
        ),
    )


@pytest_asyncio.fixture(scope="function")
async def sample_subscription(test_db: AsyncSession, user_entity):
    """Active pro subscription for ``test_user``."""
    return await create_subscription(test_db, user_entity.id)


async def create_invitation(
    test_db: AsyncSession,
    location_id: str,
    invited_by_user_id: str,
    email: str = "other@example.com",
    status: str = "pending",
    expires_at: datetime = None,
    token: str = "a" * 64,
) -> InvitationEntity:
    return await _add(
        test_db,
        InvitationEntity(
            token=token,
            location_id=location_id,
            email=email,
            invited_by_user_id=invited_by_user_id,
            status=status,
            expires_at=expires_at or datetime.now(timezone.utc) + timedelta(days=7),
        ),
    )


@pytest_asyncio.fixture(scope="function")
async def sample_invitation(test_db: AsyncSession, sample_location, user_entity):
    """Pending invitation to ``sample_location`` for other@example.com."""
    return await create_invitation(test_db, sample_location.id, user_entity.id)
