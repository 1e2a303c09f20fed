import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("STORAGE_BACKEND", "local")

import pytest
import uuid
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
from app.core.database import Base
from app.core.constants import RoleEnum
from app.core.security import create_access_token
from app.crud.user import user as crud_user
from app.services.file import file_service
from app.services.storage import LocalBlobStorage
from app.utils import cache
from app.utils import deps as deps_utils
import main

@pytest.fixture(scope="function")
def database_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()

@pytest.fixture(scope="function")
def db_session(database_engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=database_engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()

@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()
    yield
    cache.clear()

@pytest.fixture(scope="function")
def blob_storage(tmp_path, monkeypatch):
    storage = LocalBlobStorage(str(tmp_path / "blobs"))
    monkeypatch.setattr(file_service, "_storage", storage)
    return storage

@pytest.fixture(scope="function")
def client(db_session, blob_storage):
    main.app.dependency_overrides[deps_utils.get_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_transactional_db] = lambda: db_session
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()

@pytest.fixture
def user_factory(db_session):
    def _user_factory(role: RoleEnum = RoleEnum.STUDENT, is_active: bool = True, email: str = None):
        if email:
            existing = crud_user.get_by_email(db_session, email=email)
            if existing:
                return existing
        user_data = {
            "full_name": f"Test {role.value}",
            "email": email or f"{role.value}-{uuid.uuid4().hex[:8]}@test.com",
            "role": role,
            "is_active": is_active,
        }
        return crud_user.create(db_session, obj_in=user_data)
    return _user_factory

@pytest.fixture
def headers_for():
    def _headers_for(user) -> dict:
        token = create_access_token(user.id, user.role.value)
        return {"Authorization": f"Bearer {token}"}
    return _headers_for

@pytest.fixture
def admin_user(user_factory):
    return user_factory(RoleEnum.ADMIN)

@pytest.fixture
def other_admin_user(user_factory):
    return user_factory(RoleEnum.ADMIN)

@pytest.fixture
def student_user(user_factory):
    return user_factory(RoleEnum.STUDENT)

@pytest.fixture
def admin_headers(admin_user, headers_for):
    return headers_for(admin_user)

@pytest.fixture
def other_admin_headers(other_admin_user, headers_for):
    return headers_for(other_admin_user)

@pytest.fixture
def student_headers(student_user, headers_for):
    return headers_for(student_user)
