"""
Shared fixtures.
Settings point at a throwaway SQLite file before the application is imported.
"""
import os
import tempfile
from pathlib import Path

TEST_DIR = Path(tempfile.mkdtemp(prefix="blog-api-tests-"))
os.environ["DATABASE_PATH"] = str(TEST_DIR / "test.db")
os.environ["LOG_FILE"] = str(TEST_DIR / "test.log")
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient

from blog_api.database import Base, SessionLocal, engine
from blog_api.main import app
from blog_api.models import Category, PostCategory


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create tables once for the session (migrations are not run here)"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(autouse=True)
def clean_tables():
    """Empty every table after each test"""
    yield
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    # Not used as a context manager: lifespan (migrations) is skipped
    return TestClient(app)


@pytest.fixture
def make_category(db):
    """Insert a category and return its id"""
    def _make(name: str) -> str:
        category = Category(name=name)
        db.add(category)
        db.commit()
        return category.id

    return _make


@pytest.fixture
def linked_category_ids(db):
    """Category ids currently linked to a post, read straight from the join table"""
    def _linked(post_id: str) -> set:
        rows = (
            db.query(PostCategory.category_id)
            .filter(PostCategory.post_id == post_id)
            .all()
        )
        return {category_id for (category_id,) in rows}

    return _linked
