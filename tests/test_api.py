"""End-to-end tests for the marketplace HTTP API on the in-memory store."""

from __future__ import annotations

import pytest


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


@pytest.mark.asyncio
async def test_list_categories(client):
    response = await client.get("/api/categories")
    assert response.status_code == 200
    assert len(response.json()) == 6


@pytest.mark.asyncio
async def test_category_by_slug(client):
    response = await client.get("/api/categories/coding")
    assert response.status_code == 200
    assert response.json()["name"] == "Coding"

    response = await client.get("/api/categories/cooking")
    assert response.status_code == 404
    assert response.json() == {"message": "Category not found", "code": "NOT_FOUND"}


@pytest.mark.asyncio
async def test_list_prompts_camel_case(client):
    response = await client.get("/api/prompts")
    assert response.status_code == 200
    prompts = response.json()
    assert [p["id"] for p in prompts] == [6, 5, 4, 3, 2, 1]

    first = prompts[-1]
    for key in ("categoryId", "authorId", "salesCount", "isNew", "previewImage",
                "createdAt", "reviewCount"):
        assert key in first
    assert first["price"] == "12.99"
    assert set(first["author"]) == {"id", "username", "avatar"}
    assert first["category"]["slug"] == "writing"


@pytest.mark.asyncio
async def test_list_prompts_with_query_filters(client):
    response = await client.get("/api/prompts", params={"featured": "true", "isNew": "true"})
    assert [p["id"] for p in response.json()] == [3]

    response = await client.get("/api/prompts", params={"categoryId": 2})
    assert [p["id"] for p in response.json()] == [2]

    response = await client.get("/api/prompts", params={"authorId": 3})
    assert [p["id"] for p in response.json()] == [6, 3]

    response = await client.get("/api/prompts", params={"search": "stack"})
    assert [p["title"] for p in response.json()] == ["Full-Stack Developer Assistant"]

    response = await client.get("/api/prompts", params={"offset": 2, "limit": 3})
    assert [p["id"] for p in response.json()] == [4, 3, 2]


@pytest.mark.asyncio
async def test_negative_limit_rejected(client):
    response = await client.get("/api/prompts", params={"limit": -1})
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_get_prompt(client):
    response = await client.get("/api/prompts/3")
    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Full-Stack Developer Assistant"
    assert body["isFavorited"] is None
    assert body["inCart"] is None

    response = await client.get("/api/prompts/999")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_get_prompt_with_viewer_flags(client, auth_headers):
    await client.post("/api/favorites", json={"promptId": 3}, headers=auth_headers)

    response = await client.get("/api/prompts/3", headers=auth_headers)
    body = response.json()
    assert body["isFavorited"] is True
    assert body["inCart"] is False


@pytest.mark.asyncio
async def test_get_prompt_with_bad_token_is_anonymous(client):
    response = await client.get("/api/prompts/3", headers={"Authorization": "Bearer junk"})
    assert response.status_code == 200
    assert response.json()["isFavorited"] is None


@pytest.mark.asyncio
async def test_stats(client):
    response = await client.get("/api/stats")
    assert response.status_code == 200
    assert response.json() == {
        "totalPrompts": 6,
        "activeUsers": 3,
        "categoriesCount": 6,
        "totalEarnings": "0",
    }


# ---------------------------------------------------------------------------
# Prompt management
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_prompt(client, auth_headers):
    response = await client.post(
        "/api/prompts",
        json={
            "title": "Cold Email Writer",
            "description": "Outreach emails that get replies",
            "content": "Write a cold email to [PERSONA]...",
            "price": "7.50",
            "categoryId": 4,
            "tags": ["Sales"],
        },
        headers=auth_headers,
    )
    assert response.status_code == 201
    body = response.json()
    assert body["author"]["username"] == "sarah_chen"
    assert body["salesCount"] == 0

    listing = await client.get("/api/prompts", params={"limit": 1})
    assert listing.json()[0]["id"] == body["id"]


@pytest.mark.asyncio
async def test_create_prompt_requires_auth(client):
    response = await client.post("/api/prompts", json={})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_update_prompt_author_only(client, login_as):
    author = await login_as("sarah_chen")
    other = await login_as("alex_rivera")

    response = await client.patch("/api/prompts/1", json={"price": "10.00"}, headers=other)
    assert response.status_code == 403
    assert response.json()["code"] == "PERMISSION_DENIED"

    response = await client.patch("/api/prompts/1", json={"price": "10.00"}, headers=author)
    assert response.status_code == 200
    assert response.json()["price"] == "10.00"


# ---------------------------------------------------------------------------
# Favorites and cart
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_favorites_flow(client, auth_headers):
    response = await client.post("/api/favorites", json={"promptId": 2}, headers=auth_headers)
    assert response.status_code == 201
    assert response.json()["promptId"] == 2

    response = await client.get("/api/favorites/2", headers=auth_headers)
    assert response.json() == {"promptId": 2, "isMember": True}

    response = await client.get("/api/favorites", headers=auth_headers)
    assert [p["id"] for p in response.json()] == [2]

    response = await client.delete("/api/favorites/2", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Removed from favorites"}

    response = await client.delete("/api/favorites/2", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Favorite not found"


@pytest.mark.asyncio
async def test_duplicate_cart_add_rejected(client, auth_headers):
    first = await client.post("/api/cart", json={"promptId": 1}, headers=auth_headers)
    assert first.status_code == 201

    second = await client.post("/api/cart", json={"promptId": 1}, headers=auth_headers)
    assert second.status_code == 400
    assert second.json() == {"message": "Already in cart", "code": "DUPLICATE_MEMBERSHIP"}

    response = await client.get("/api/cart", headers=auth_headers)
    assert len(response.json()) == 1


@pytest.mark.asyncio
async def test_membership_unknown_prompt(client, auth_headers):
    response = await client.post("/api/cart", json={"promptId": 999}, headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_membership_requires_auth(client):
    for path in ("/api/favorites", "/api/cart", "/api/purchases"):
        response = await client.get(path)
        assert response.status_code == 401, path


@pytest.mark.asyncio
async def test_clear_cart(client, auth_headers):
    await client.post("/api/cart", json={"promptId": 1}, headers=auth_headers)
    await client.post("/api/cart", json={"promptId": 2}, headers=auth_headers)

    response = await client.delete("/api/cart", headers=auth_headers)
    assert response.json() == {"message": "Cart cleared"}

    response = await client.get("/api/cart/1", headers=auth_headers)
    assert response.json()["isMember"] is False


@pytest.mark.asyncio
async def test_checkout_flow(client, auth_headers):
    await client.post("/api/cart", json={"promptId": 1}, headers=auth_headers)
    await client.post("/api/cart", json={"promptId": 6}, headers=auth_headers)

    response = await client.post("/api/cart/checkout", headers=auth_headers)
    assert response.status_code == 201
    assert [(p["promptId"], p["price"]) for p in response.json()] == [
        (1, "12.99"),
        (6, "22.99"),
    ]

    response = await client.get("/api/cart", headers=auth_headers)
    assert response.json() == []

    response = await client.get("/api/purchases", headers=auth_headers)
    assert [p["id"] for p in response.json()] == [1, 6]

    response = await client.get("/api/stats")
    assert response.json()["totalEarnings"] == "35.98"


@pytest.mark.asyncio
async def test_checkout_empty_cart(client, auth_headers):
    response = await client.post("/api/cart/checkout", headers=auth_headers)
    assert response.status_code == 400
    assert response.json() == {"message": "Cart is empty", "code": "VALIDATION_ERROR"}


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_reviews_flow(client, auth_headers):
    response = await client.post(
        "/api/prompts/2/reviews",
        json={"rating": 5, "comment": "Stunning results"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    assert response.json()["userId"] == 1

    response = await client.get("/api/prompts/2/reviews")
    assert [r["comment"] for r in response.json()] == ["Stunning results"]

    response = await client.get("/api/prompts/2")
    assert response.json()["reviewCount"] == 1


@pytest.mark.asyncio
async def test_review_rating_out_of_range(client, auth_headers):
    response = await client.post(
        "/api/prompts/2/reviews", json={"rating": 9}, headers=auth_headers
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_review_requires_auth(client):
    response = await client.post("/api/prompts/2/reviews", json={"rating": 4})
    assert response.status_code == 401
