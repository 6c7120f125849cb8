"""
Tests for venue endpoints.
"""

import json

import pytest
from httpx import AsyncClient

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def venue_form(**overrides) -> dict:
    form = {
        "name": "Riverside Loft",
        "address": "5 River Road",
        "capacity": "80",
        "price_per_day": "250",
        "description": "Open plan loft",
        "amenities": json.dumps(["wifi", "projector"]),
        "availability": "true",
    }
    form.update(overrides)
    return form


@pytest.mark.asyncio
async def test_create_venue(client: AsyncClient, venue_owner, owner_headers, image_storage):
    response = await client.post(
        "/venues",
        data=venue_form(),
        files=[("images", ("front.png", PNG_BYTES, "image/png")), ("images", ("hall.jpg", b"jpeg", "image/jpeg"))],
        headers=owner_headers,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Riverside Loft"
    assert data["capacity"] == 80
    assert data["price_per_day"] == 250
    assert data["amenities"] == ["wifi", "projector"]
    assert data["availability"] is True
    assert data["rating"] == 0.0
    assert data["owner"]["id"] == venue_owner.id
    assert len(data["images"]) == 2
    assert set(data["images"]) == set(image_storage.files)

    mine = await client.get("/my-venues", headers=owner_headers)
    assert [v["id"] for v in mine.json()] == [data["id"]]


@pytest.mark.asyncio
async def test_create_venue_comma_amenities_and_unavailable(client: AsyncClient, owner_headers):
    response = await client.post(
        "/venues",
        data=venue_form(amenities="wifi, stage ,", availability="false"),
        headers=owner_headers,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["amenities"] == ["wifi", "stage"]
    assert data["availability"] is False


@pytest.mark.asyncio
async def test_create_venue_missing_fields(client: AsyncClient, owner_headers):
    response = await client.post(
        "/venues",
        data={"name": "Nameless", "capacity": "10"},
        headers=owner_headers,
    )
    assert response.status_code == 400
    assert response.json()["context"]["missing_fields"] == ["address", "price_per_day"]


@pytest.mark.asyncio
async def test_create_venue_bad_amenities(client: AsyncClient, owner_headers):
    response = await client.post("/venues", data=venue_form(amenities="[not json"), headers=owner_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid amenities format"


@pytest.mark.asyncio
async def test_create_venue_rejects_non_image(client: AsyncClient, owner_headers, image_storage):
    response = await client.post(
        "/venues",
        data=venue_form(),
        files=[("images", ("notes.txt", b"hello", "text/plain"))],
        headers=owner_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Only image files are allowed!"
    assert image_storage.files == {}


@pytest.mark.asyncio
async def test_create_venue_rejects_too_many_images(client: AsyncClient, owner_headers):
    files = [("images", (f"img{i}.png", PNG_BYTES, "image/png")) for i in range(6)]
    response = await client.post("/venues", data=venue_form(), files=files, headers=owner_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_venue_requires_venue_owner(client: AsyncClient, organizer_headers):
    response = await client.post("/venues", data=venue_form(), headers=organizer_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_list_venues_anonymous_sees_all(client: AsyncClient, test_venue, other_owner):
    response = await client.get("/venues")
    assert response.status_code == 200
    venues = response.json()
    assert [v["id"] for v in venues] == [test_venue.id]
    assert venues[0]["owner"]["email"] == "owner@example.com"


@pytest.mark.asyncio
async def test_list_venues_owner_sees_own(client: AsyncClient, test_venue, owner_headers, other_owner_headers):
    own = await client.get("/venues", headers=owner_headers)
    assert [v["id"] for v in own.json()] == [test_venue.id]

    other = await client.get("/venues", headers=other_owner_headers)
    assert other.json() == []


@pytest.mark.asyncio
async def test_list_venues_with_bad_token(client: AsyncClient, test_venue):
    response = await client.get("/venues", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_get_venue(client: AsyncClient, test_venue):
    response = await client.get(f"/venues/{test_venue.id}")
    assert response.status_code == 200
    assert response.json()["name"] == "Grand Hall"


@pytest.mark.asyncio
async def test_get_venue_not_found(client: AsyncClient, db_session):
    response = await client.get("/venues/99999")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_toggle_availability(client: AsyncClient, test_venue, owner_headers):
    response = await client.put(
        f"/venues/{test_venue.id}/availability",
        json={"availability": False},
        headers=owner_headers,
    )
    assert response.status_code == 200
    assert response.json()["availability"] is False


@pytest.mark.asyncio
async def test_toggle_availability_other_owner(client: AsyncClient, test_venue, other_owner_headers):
    response = await client.put(
        f"/venues/{test_venue.id}/availability",
        json={"availability": False},
        headers=other_owner_headers,
    )
    assert response.status_code == 403

    detail = (await client.get(f"/venues/{test_venue.id}")).json()
    assert detail["availability"] is True


@pytest.mark.asyncio
async def test_my_venues_requires_venue_owner(client: AsyncClient, organizer_headers):
    response = await client.get("/my-venues", headers=organizer_headers)
    assert response.status_code == 403
