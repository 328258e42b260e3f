"""Pytest configuration and fixtures."""

import os
from collections.abc import Callable, Generator

# Configure before the application modules read settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["OPENROUTER_API_KEY"] = ""
os.environ["STORAGE_BACKEND"] = "local"

import pytest  # noqa: E402
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.summarizer.database import Base, get_db
from app.summarizer.main import app
from app.summarizer.services.analysis import get_analysis_service
from app.summarizer.services.storage import LocalStorage, get_storage

from .helpers import FakeAnalysisService, build_docx, build_pdf, paragraph, table


@pytest.fixture
def docx_factory() -> Callable[..., bytes]:
    return build_docx


@pytest.fixture
def pdf_factory() -> Callable[..., bytes]:
    return build_pdf


@pytest.fixture
def sample_docx_bytes() -> bytes:
    return build_docx(
        paragraph("Quarterly Report")
        + table(["Region", "Revenue"], ["North", "100"])
        + paragraph("Prepared by", "<tab>", "Finance")
    )


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    return build_pdf(["Invoice 42", "Total due 120.50 USD"])


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Isolated in-memory database session."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def storage(tmp_path) -> LocalStorage:
    return LocalStorage(tmp_path / "storage")


@pytest.fixture
def fake_analyzer() -> FakeAnalysisService:
    return FakeAnalysisService()


@pytest.fixture
def client(
    db_session: Session,
    storage: LocalStorage,
    fake_analyzer: FakeAnalysisService,
) -> Generator[TestClient, None, None]:
    """Create a test client wired to isolated services."""
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_analysis_service] = lambda: fake_analyzer
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
