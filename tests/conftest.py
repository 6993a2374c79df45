"""
Shared test fixtures and configuration for entire test suite.

Provides: SQLite async databases (in-memory and file-backed), a fake S3
upload client, owner identities, and a batch issuing helper
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from upload_tracker.application.services.batch_issuance_service import BatchIssuanceService
from upload_tracker.boundary.aws.s3_client import S3UploadClient
from upload_tracker.boundary.db.base import Base
from upload_tracker.boundary.db.connection import configure_sqlite_engine
from upload_tracker.configs import Settings
from upload_tracker.models.batch import BatchItemRequest

TEST_BUCKET = "test-upload-bucket"


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    configure_sqlite_engine(engine)

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()

    await engine.dispose()


@pytest.fixture
async def file_session_factory(tmp_path):
    """
    File-backed SQLite database where every session gets its own connection.

    Used to run truly concurrent callers against one job.

    Yields:
        async_sessionmaker: Factory for independent sessions
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'uploads.db'}",
        connect_args={"timeout": 30},
    )
    configure_sqlite_engine(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def owner_id() -> uuid.UUID:
    """Identity owning the test batches."""
    return uuid.uuid4()


@pytest.fixture
def other_owner_id() -> uuid.UUID:
    """Identity that owns nothing."""
    return uuid.uuid4()


@pytest.fixture
def fake_s3_client() -> MagicMock:
    """
    S3UploadClient double that signs every key without touching AWS.

    Returns:
        MagicMock: spec'd S3UploadClient
    """
    client = MagicMock(spec=S3UploadClient)
    client.bucket = TEST_BUCKET

    def _sign(storage_key, content_type="application/octet-stream", expires_in=3600):
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
        return f"https://{TEST_BUCKET}.s3.amazonaws.com/{storage_key}?X-Amz-Signature=test", expires_at

    client.issue_write_permission.side_effect = _sign
    return client


@pytest.fixture
def issue_batch(fake_s3_client):
    """
    Helper issuing a batch of ``count`` items through the real service.

    Returns:
        Callable: async (session, owner_id, count) -> IssueBatchResponse
    """

    async def _issue(session: AsyncSession, owner: uuid.UUID, count: int):
        service = BatchIssuanceService(session, fake_s3_client, settings=Settings())
        items = [
            BatchItemRequest(name=f"photo-{i}.jpg", size=1024 + i, content_type="image/jpeg")
            for i in range(count)
        ]
        return await service.issue_batch(owner, items)

    return _issue
