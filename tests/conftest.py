import inspect
import os
from unittest.mock import patch

# Settings are read at import time by fitback.main; give it a signing key.
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import anyio  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

from fitback.auth.passwords import hash_password  # noqa: E402
from fitback.auth.tokens import SessionTokenService, get_session_token_service  # noqa: E402
from fitback.core.settings import Settings, get_settings  # noqa: E402
from fitback.db.engine import get_session  # noqa: E402
from fitback.main import app  # noqa: E402
from fitback.user.models import User  # noqa: E402

TEST_SECRET = "test-secret-key"
TEST_PASSWORD = "correct-horse-battery"


def pytest_configure(config: pytest.Config) -> None:
    # Tests use @pytest.mark.asyncio, but we intentionally rely on anyio.
    config.addinivalue_line(
        "markers",
        "asyncio: run async tests using anyio (project-local hook)",
    )


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Run @pytest.mark.asyncio tests with anyio.

    This avoids adding an external pytest-asyncio dependency.
    """
    if pyfuncitem.get_closest_marker("asyncio") is None:
        return None

    test_func = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_func):
        return None

    funcargs = {
        name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames
    }

    async def _run_async_test() -> None:
        await test_func(**funcargs)

    anyio.run(_run_async_test)
    return True


@pytest.fixture(name="session")
def session_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture(name="settings")
def settings_fixture() -> Settings:
    """Settings tuned for fast, offline tests."""
    return Settings(
        env_name="test",
        database_url="sqlite://",
        jwt_secret_key=TEST_SECRET,
        bcrypt_rounds=4,
        server_url="http://testserver",
        resend_api_key="re_test_key",
        github_client_id="gh-client-id",
        github_client_secret="gh-client-secret",
        heavy_task_iterations=1000,
    )


@pytest.fixture(name="tokens")
def tokens_fixture(settings: Settings) -> SessionTokenService:
    return SessionTokenService(
        secret_key=settings.jwt_secret_key,
        expires_in=settings.session_expires_in,
    )


def _make_user(session: Session, **overrides) -> User:
    fields = {
        "email": "test@example.com",
        "password_hash": hash_password(TEST_PASSWORD, rounds=4),
        "user_name": "Test User",
        "age": 30,
        "fitness_goal": "strength",
        "fitness_level": "beginner",
        "subscription_status": "free",
        "email_verified": True,
    }
    fields.update(overrides)
    user = User(**fields)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture(name="test_user")
def test_user_fixture(session: Session) -> User:
    """A verified user who can sign in with TEST_PASSWORD."""
    return _make_user(session)


@pytest.fixture(name="unverified_user")
def unverified_user_fixture(session: Session) -> User:
    """A freshly registered user with a pending verification token."""
    return _make_user(
        session,
        email="pending@example.com",
        email_verified=False,
        pending_email_verification_token="pending-token-123",
    )


@pytest.fixture(name="mock_send")
def mock_send_fixture():
    """Patch the Resend transport so no email leaves the test run."""
    with patch("fitback.core.email.resend.Emails.send") as mock_send:
        mock_send.return_value = {"id": "email-id-123"}
        yield mock_send


@pytest.fixture(name="client")
def client_fixture(
    session: Session,
    settings: Settings,
    tokens: SessionTokenService,
    mock_send,
):
    """Create a test client with overridden dependencies."""
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_session_token_service] = lambda: tokens

    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()


@pytest.fixture(name="auth_headers")
def auth_headers_fixture(tokens: SessionTokenService, test_user: User):
    """Bearer header carrying a valid session token for test_user."""
    return {"Authorization": f"Bearer {tokens.issue(test_user.id)}"}
