import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from content_attachments.config import settings
from content_attachments.database import Base, get_db
from content_attachments.main import app
from content_attachments.models.section import Section
from content_attachments.utils.storage import UploadedContent

TEST_DB_URL = "sqlite:///./test_content_attachments.db"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    test_upload_dir = tmp_path / "uploads"
    test_upload_dir.mkdir(parents=True, exist_ok=True)
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(test_upload_dir))
    return test_upload_dir


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_section(db):
    root = Section(name="root", path="/")
    db.add(root)
    db.commit()
    section = Section(name="attachables", parent_id=root.section_id, path="/attachables")
    db.add(section)
    db.commit()
    db.refresh(section)
    return section


def file_upload(filename: str = "foo.jpg", content: bytes = b"01010010101010101", content_type: str = "image/jpeg"):
    # 업로드 요청을 흉내 낸 파일 객체
    return UploadedContent(filename=filename, content=content, content_type=content_type)


def reload(db, record):
    db.expire_all()
    return db.get(type(record), record.id)
