"""Integration tests for upload, import/export, placeholder sections and health."""

from decimal import Decimal

import pytest
from services.shop_service.models import Category, ImportJob, Product
from sqlalchemy import select
from tests.factories import CategoryFactory, ProductFactory

# ---------------------------------------------------------------------------
# Upload
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_upload_stores_file(client, tmp_path):
    response = await client.post(
        "/api/upload",
        files={"file": ("brake pad.png", b"fake-png-bytes", "image/png")},
    )

    assert response.status_code == 200, response.text
    data = response.json()["data"]
    assert data["fileName"].endswith("-brake_pad.png")
    assert data["url"] == f"/uploads/{data['fileName']}"
    assert data["size"] == len(b"fake-png-bytes")
    assert data["contentType"] == "image/png"
    assert (tmp_path / "uploads" / data["fileName"]).read_bytes() == b"fake-png-bytes"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_upload_without_file_is_400(client):
    response = await client.post("/api/upload", data={"other": "field"})

    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"


# ---------------------------------------------------------------------------
# Import / export
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_import_upserts_by_sku_and_counts_errors(client, db_session):
    db_session.add(ProductFactory.create(sku="EXIST-1", name="Old name", price=Decimal("5.00")))
    await db_session.commit()

    response = await client.post(
        "/api/import-export/import",
        json={
            "fileName": "parts.json",
            "products": [
                {"name": "New name", "sku": "EXIST-1", "price": 6.5},
                {"name": "Wiper", "sku": "W-1", "price": 9, "category": "Wipers"},
                {"name": "No sku", "price": 1},
                {"sku": "NO-NAME"},
            ],
        },
    )

    assert response.status_code == 200, response.text
    job = response.json()["data"]
    assert job["status"] == "completed"
    assert job["totalItems"] == 4
    assert job["processedItems"] == 4
    assert job["createdCount"] == 1
    assert job["updatedCount"] == 1
    assert job["errorCount"] == 2

    updated = (
        await db_session.execute(select(Product).where(Product.sku == "EXIST-1"))
    ).scalar_one()
    assert updated.name == "New name"
    category = (
        await db_session.execute(select(Category).where(Category.name == "Wipers"))
    ).scalar_one()
    wiper = (await db_session.execute(select(Product).where(Product.sku == "W-1"))).scalar_one()
    assert wiper.category_id == category.id


@pytest.mark.asyncio
@pytest.mark.integration
async def test_export_and_status(client, db_session):
    category = CategoryFactory.create(name="Lights")
    db_session.add(category)
    await db_session.commit()
    db_session.add(ProductFactory.create(name="Bulb", category_id=category.id))
    await db_session.commit()

    export = await client.get("/api/import-export/export")
    assert export.status_code == 200, export.text
    data = export.json()["data"]
    assert data["job"]["type"] == "export"
    assert data["products"][0]["category"] == "Lights"

    status = await client.get("/api/import-export")
    assert status.status_code == 200
    body = status.json()["data"]
    assert body["totalProducts"] == 1
    assert [job["type"] for job in body["recentJobs"]] == ["export"]

    jobs = (await db_session.execute(select(ImportJob))).scalars().all()
    assert len(jobs) == 1


# ---------------------------------------------------------------------------
# Placeholders / health
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize("section", ["reviews", "shipping", "security", "analytics", "database"])
async def test_placeholder_sections_keep_contract(client, section):
    listed = await client.get(f"/api/{section}")
    assert listed.status_code == 200
    assert listed.json()["success"] is True
    assert listed.json()["data"] == []
    assert listed.json()["message"]

    posted = await client.post(f"/api/{section}", json={"anything": 1})
    assert posted.status_code == 200
    assert posted.json()["data"] is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_health_and_request_id(anon_client):
    response = await anon_client.get("/health", headers={"X-Request-ID": "abc-123"})

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.headers["X-Request-ID"] == "abc-123"
