"""
Tests for portfolio services and their image galleries.
"""

import pytest

API = "/api/v1/services"

SERVICE = {
    "title": "E-commerce Platform",
    "description": "Storefront rebuild",
    "clientName": "Acme Retail",
    "technologies": ["FastAPI", "React"],
    "metrics": {"conversion": "+18%"},
    "images": [
        {"imageUrl": "/uploads/hero.png", "isPrimary": True, "displayOrder": 1},
        {"imageUrl": "/uploads/cart.png", "caption": "Cart", "displayOrder": 0},
    ],
}


async def create_service(client, headers, **overrides):
    resp = await client.post(API, json={**SERVICE, **overrides}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


class TestServices:
    @pytest.mark.asyncio
    async def test_create_with_gallery(self, client, editor, editor_headers):
        service = await create_service(client, editor_headers)

        assert service["slug"] == "e-commerce-platform"
        assert service["status"] == "ongoing"
        assert service["createdBy"] == editor.id
        assert service["metrics"] == {"conversion": "+18%"}
        assert [img["imageUrl"] for img in service["images"]] == ["/uploads/cart.png", "/uploads/hero.png"]

    @pytest.mark.asyncio
    async def test_update_replaces_gallery(self, client, editor_headers):
        service = await create_service(client, editor_headers)

        resp = await client.put(
            f"{API}/{service['id']}",
            json={"images": [{"imageUrl": "/uploads/new.png"}], "featured": True},
            headers=editor_headers,
        )

        data = resp.json()["data"]
        assert [img["imageUrl"] for img in data["images"]] == ["/uploads/new.png"]
        assert data["featured"] is True
        assert data["technologies"] == ["FastAPI", "React"]

    @pytest.mark.asyncio
    async def test_update_without_images_keeps_gallery(self, client, editor_headers):
        service = await create_service(client, editor_headers)
        resp = await client.put(f"{API}/{service['id']}", json={"status": "completed"}, headers=editor_headers)
        assert len(resp.json()["data"]["images"]) == 2
        assert resp.json()["data"]["status"] == "completed"

    @pytest.mark.asyncio
    async def test_filters(self, client, editor_headers):
        await create_service(client, editor_headers, featured=True)
        await create_service(client, editor_headers, title="Mobile App", status="completed", images=[])

        featured = await client.get(API, params={"featured": "true"})
        completed = await client.get(API, params={"status": "completed"})
        by_client = await client.get(API, params={"search": "acme"})

        assert [s["title"] for s in featured.json()["data"]] == ["E-commerce Platform"]
        assert [s["title"] for s in completed.json()["data"]] == ["Mobile App"]
        assert by_client.json()["pagination"]["total"] == 2

    @pytest.mark.asyncio
    async def test_duplicate_title(self, client, editor_headers):
        await create_service(client, editor_headers)
        resp = await client.post(API, json=SERVICE, headers=editor_headers)
        assert resp.status_code == 409

    @pytest.mark.asyncio
    async def test_viewer_cannot_create(self, client, viewer_headers):
        resp = await client.post(API, json=SERVICE, headers=viewer_headers)
        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_soft_delete(self, client, editor_headers):
        service = await create_service(client, editor_headers)

        await client.delete(f"{API}/{service['id']}", headers=editor_headers)

        assert (await client.get(f"{API}/slug/{service['slug']}")).status_code == 404
        assert (await client.get(API)).json()["data"] == []
