"""
End-to-end HTTP flow against a real SQLite database.

Only the S3 client is faked; routing, services, CRUD and the aggregation
SQL all run for real.
"""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from upload_tracker.api.deps import get_s3_upload_client
from upload_tracker.api.main import create_app
from upload_tracker.boundary.db import get_async_db
from upload_tracker.boundary.db.base import Base
from upload_tracker.boundary.db.connection import configure_sqlite_engine


@pytest.fixture
def client(tmp_path, fake_s3_client):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'api.db'}",
        poolclass=NullPool,
    )
    configure_sqlite_engine(engine)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    schema = {"ready": False}

    async def _get_db():
        # Tables are created on the app's event loop
        if not schema["ready"]:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            schema["ready"] = True
        async with session_factory() as session:
            yield session

    app = create_app()
    app.dependency_overrides[get_async_db] = _get_db
    app.dependency_overrides[get_s3_upload_client] = lambda: fake_s3_client

    with TestClient(app) as test_client:
        yield test_client


def _issue(client, owner_id, names):
    response = client.post(
        "/api/v1/batches",
        json={
            "ownerId": str(owner_id),
            "items": [{"name": name, "size": 2048, "contentType": "image/png"} for name in names],
        },
    )
    assert response.status_code == 201
    return response.json()


def test_batch_lifecycle_over_http(client):
    owner_id = uuid4()
    headers = {"X-Owner-Id": str(owner_id)}
    batch = _issue(client, owner_id, ["one.png", "two.png", "three.png"])
    first, second, third = (item["itemId"] for item in batch["items"])

    assert client.put(f"/api/v1/items/{first}/begin", headers=headers).status_code == 200
    assert client.put(f"/api/v1/items/{first}/complete", headers=headers).status_code == 200

    status = client.get(f"/api/v1/jobs/{batch['jobId']}/status", headers=headers).json()
    assert {k: status[k] for k in ("total", "pending", "inProgress", "done", "failed", "status")} == {
        "total": 3,
        "pending": 2,
        "inProgress": 0,
        "done": 1,
        "failed": 0,
        "status": "active",
    }

    # Retried complete is a conflict, not a second count
    retry = client.put(f"/api/v1/items/{first}/complete", headers=headers)
    assert retry.status_code == 409

    assert client.put(f"/api/v1/items/{second}/fail", headers=headers).status_code == 200
    client.put(f"/api/v1/items/{third}/begin", headers=headers)
    last = client.put(f"/api/v1/items/{third}/complete", headers=headers).json()
    assert last["jobStatus"] == "partially_failed"

    status = client.get(f"/api/v1/jobs/{batch['jobId']}/status", headers=headers).json()
    assert status["status"] == "partially_failed"
    assert (status["done"], status["failed"]) == (2, 1)
    assert status["endedAt"] is not None

    audit = client.get(f"/api/v1/jobs/{batch['jobId']}/audit", headers=headers).json()
    assert audit["consistent"] is True


def test_other_owner_sees_not_found(client):
    owner_id = uuid4()
    batch = _issue(client, owner_id, ["secret.png"])
    stranger = {"X-Owner-Id": str(uuid4())}

    item_response = client.put(f"/api/v1/items/{batch['items'][0]['itemId']}/begin", headers=stranger)
    job_response = client.get(f"/api/v1/jobs/{batch['jobId']}/status", headers=stranger)
    missing = client.get(f"/api/v1/jobs/{uuid4()}/status", headers=stranger)

    assert item_response.status_code == 404
    assert job_response.status_code == 404
    assert missing.status_code == 404
    assert job_response.json()["error"] == missing.json()["error"] == "not_found"


def test_empty_batch_rejected(client):
    response = client.post("/api/v1/batches", json={"ownerId": str(uuid4()), "items": []})

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_request"
