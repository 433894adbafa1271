"""
Pytest configuration and fixtures
"""
import os
import sys
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add project root and src to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
sys.path.insert(0, str(project_root / "src"))

# Set test environment variables before importing
os.environ["ENV"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key-for-agerapp-tests-only-min-32-chars"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOADS_DIR"] = tempfile.mkdtemp(prefix="agerapp-uploads-")
os.environ["ADMIN_CREATION_SECRET"] = "bootstrap-secret"
os.environ["PAYSTACK_SECRET"] = "sk_test_agerapp"
os.environ["API_URL"] = ""
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce log noise in tests
for smtp_var in ("SMTP_HOST", "SMTP_USER", "SMTP_PASSWORD", "MAIL_HOST", "MAIL_USERNAME", "MAIL_PASSWORD"):
    os.environ.pop(smtp_var, None)

# Import after setting env vars
from agerapp_api.auth import create_user_token, get_password_hash
from agerapp_api.database import Base, SessionLocal, get_db, User, UserRole
from agerapp_api.db.engine import engine
from agerapp_api.services.email_provider import DevEmailProvider, set_email_provider
from agerapp_api.services.storage_provider import LocalDiskStorageProvider, set_storage_provider
from api_server import app

TEST_PASSWORD = "testpassword123"


@pytest.fixture(scope="function")
def db_session():
    """Fresh schema and a session shared with the app for each test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()

    def override_get_db():
        try:
            yield session
        except Exception:
            session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    yield session

    session.close()
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def client(db_session):
    """Create test client"""
    return TestClient(app)


@pytest.fixture(scope="function", autouse=True)
def outbox():
    """Capture outgoing emails instead of sending them"""
    provider = DevEmailProvider()
    set_email_provider(provider)
    yield provider.outbox
    set_email_provider(None)


@pytest.fixture(scope="function", autouse=True)
def storage(tmp_path):
    """Store uploads in a per-test directory"""
    provider = LocalDiskStorageProvider(base_path=str(tmp_path / "uploads"))
    set_storage_provider(provider)
    yield provider
    set_storage_provider(None)


@pytest.fixture(scope="function")
def make_user(db_session):
    """Factory for verified users"""
    counter = {"n": 0}

    def _make_user(**overrides):
        counter["n"] += 1
        fields = {
            "full_name": f"Test User {counter['n']}",
            "email": f"user{counter['n']}@example.com",
            "phone": f"+23480000000{counter['n']:02d}",
            "role": UserRole.USER,
            "password": get_password_hash(TEST_PASSWORD),
            "is_verified": True,
        }
        fields.update(overrides)
        user = User(**fields)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture(scope="function")
def test_user(make_user):
    return make_user(
        full_name="Ada Trader",
        email="ada@example.com",
        business_name="Ada Foods",
        country="Nigeria",
        state="Lagos",
    )


@pytest.fixture(scope="function")
def admin_user(make_user):
    return make_user(full_name="Site Admin", email="admin@example.com", role=UserRole.ADMIN)


def headers_for(user):
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture
def login_headers():
    """Bearer headers for any user"""
    return headers_for


@pytest.fixture(scope="function")
def auth_headers(test_user):
    """Authentication headers for the test user"""
    return headers_for(test_user)


@pytest.fixture(scope="function")
def admin_headers(admin_user):
    return headers_for(admin_user)


# Minimal PNG payload for upload tests
PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06\x00\x00\x00"
    b"\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f\x00\x00\x01\x01\x00\x05\x18\xd8N\x00"
    b"\x00\x00\x00IEND\xaeB`\x82"
)


@pytest.fixture
def png_file():
    """Factory for multipart image tuples"""
    def _png_file(name="photo.png"):
        return (name, PNG_BYTES, "image/png")
    return _png_file
