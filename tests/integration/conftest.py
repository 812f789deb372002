import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401  registers every table on SQLModel.metadata
from config import ApplicationConfig
from src.adapter.services.pdf_service import ReportLabPdfService
from src.depends import get_email_service, get_payment_gateway, get_pdf_service, get_session
from tests.fixtures.fakes import FakePaymentGateway, RecordingEmailService


def make_token(sub: str, email: str, role: str = "client", account_type: str = "individual", **claims) -> str:
    """Bearer token signed like the auth provider's"""
    payload = {"sub": sub, "email": email, "role": role, "account_type": account_type, **claims}
    return jwt.encode(payload, ApplicationConfig.JWT_SECRET, algorithm=ApplicationConfig.JWT_ALGORITHM)


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    return auth_header(make_token("admin-1", "contact@bellafleurs.fr", role="admin"))


@pytest.fixture
def customer_headers():
    return auth_header(make_token("user-1", "marie@example.com"))


@pytest.fixture
def corporate_headers():
    return auth_header(
        make_token("corp-1", "compta@acme.fr", account_type="corporate", company_name="Acme SAS")
    )


@pytest_asyncio.fixture(scope="function")
async def engine():
    """Create a fresh in-memory database per test"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest.fixture
def payment_gateway():
    return FakePaymentGateway()


@pytest.fixture
def email_service():
    return RecordingEmailService()


@pytest.fixture
def pdf_service():
    return ReportLabPdfService()


@pytest_asyncio.fixture
async def client(db_session, payment_gateway, email_service, pdf_service):
    """Create test client with database session and service overrides"""
    from src.api.app import create_app

    app = create_app(ApplicationConfig)

    # Override the session dependency to use test session
    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_payment_gateway] = lambda: payment_gateway
    app.dependency_overrides[get_email_service] = lambda: email_service
    app.dependency_overrides[get_pdf_service] = lambda: pdf_service

    # Use ASGITransport for httpx AsyncClient
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def headers_for():
    """Build auth headers for any identity: headers_for("u1", "a@b.fr", role="admin")"""
    return lambda sub, email, **claims: auth_header(make_token(sub, email, **claims))
