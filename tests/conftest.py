"""Pytest configuration and fixtures."""

import os
from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from uuid import uuid4

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from domain.entities.profile import UserRole
from domain.services.profile_service import ProfileService
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

TEST_SECRET_KEY = "test-secret-key"


class ActingUser:
    """The principal the API test client authenticates as; switch with ``.user = ...``."""

    def __init__(self, user: TokenUser) -> None:
        self.user = user


def make_user(role: UserRole = UserRole.CREATOR, username: str | None = None) -> TokenUser:
    """A fresh principal with a unique id and email."""
    user_id = uuid4()
    name = username or f"user{user_id.hex[:6]}"
    return TokenUser(id=user_id, email=f"{name}@example.com", username=name, role=role)


@pytest.fixture(autouse=True)
def _reset_profile_cache() -> None:
    """Every test starts with an empty provisioned-profile cache."""
    ProfileService.clear_provisioned_cache()


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """A throwaway SQLite database per test, file-backed so sessions get real connections."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """Unit of Work factory bound to the test database."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
def creator_user() -> TokenUser:
    """A creator principal."""
    return make_user(UserRole.CREATOR, "creator")


@pytest.fixture
def admin_user() -> TokenUser:
    """An admin principal."""
    return make_user(UserRole.ADMIN, "reviewer")


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key=TEST_SECRET_KEY,
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def auth_headers(auth_provider: JWTAuthProvider, creator_user: TokenUser) -> dict[str, str]:
    """Authorization headers carrying a real token for the creator."""
    return {"Authorization": f"Bearer {auth_provider.create_token(creator_user)}"}


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth, no database overrides)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def acting_user(creator_user: TokenUser) -> ActingUser:
    """Requests made by ``api_client`` authenticate as this principal."""
    return ActingUser(creator_user)


@pytest.fixture
async def api_client(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    acting_user: ActingUser,
    auth_provider: JWTAuthProvider,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client wired to the test database.

    This client:
    - Uses a per-test SQLite database
    - Authenticates every request as ``acting_user.user``
    - Builds every service on the test Unit of Work factory
    """
    from api.dependencies.auth import get_auth_provider, get_current_user
    from api.v1.dependencies import (
        get_agency_service,
        get_invite_service,
        get_membership_service,
        get_profile_service,
        get_submission_service,
    )
    from domain.services.agency_service import AgencyService
    from domain.services.invite_service import InviteService
    from domain.services.membership_service import MembershipService
    from domain.services.submission_service import SubmissionService
    from main import create_app

    app = create_app()

    invite_service = InviteService(
        uow_factory, link_builder=lambda code: f"http://test/invite/{code}"
    )

    async def override_get_user() -> TokenUser:
        return acting_user.user

    app.dependency_overrides[get_current_user] = override_get_user
    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_profile_service] = lambda: ProfileService(uow_factory)
    app.dependency_overrides[get_invite_service] = lambda: invite_service
    app.dependency_overrides[get_membership_service] = lambda: MembershipService(
        uow_factory, invite_service=invite_service
    )
    app.dependency_overrides[get_agency_service] = lambda: AgencyService(
        uow_factory, invite_service=invite_service
    )
    app.dependency_overrides[get_submission_service] = lambda: SubmissionService(uow_factory)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
