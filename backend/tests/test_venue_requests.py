"""
Tests for the venue request workflow.
"""

import pytest
from httpx import AsyncClient

from venue_booking.services.venue_request_service import can_transition


@pytest.mark.parametrize(
    "current,target,allowed",
    [
        ("pending", "approved", True),
        ("pending", "rejected", True),
        ("pending", "pending", False),
        ("approved", "rejected", False),
        ("approved", "approved", False),
        ("rejected", "approved", False),
    ],
)
def test_transition_table(current, target, allowed):
    assert can_transition(current, target) is allowed


@pytest.mark.asyncio
async def test_owner_approves_request(client: AsyncClient, test_event, owner_headers):
    response = await client.patch(
        f"/vevent/{test_event.id}/venue-request",
        json={"action": "approved", "response": "See you there"},
        headers=owner_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    event = body["event"]
    assert event["status"] == "approved"
    assert event["venue_request"]["status"] == "approved"
    assert event["venue_request"]["response"] == "See you there"
    assert event["venue_request"]["responded_at"] is not None


@pytest.mark.asyncio
async def test_owner_rejects_request(client: AsyncClient, test_event, owner_headers):
    response = await client.patch(
        f"/vevent/{test_event.id}/venue-request",
        json={"action": "rejected", "response": "Fully booked"},
        headers=owner_headers,
    )
    assert response.status_code == 200
    event = response.json()["event"]
    assert event["status"] == "rejected"
    assert event["venue_request"]["status"] == "rejected"


@pytest.mark.asyncio
async def test_other_owner_cannot_decide(client: AsyncClient, test_event, other_owner_headers):
    """Owner B approving a request for owner A's venue is forbidden and changes nothing."""
    response = await client.patch(
        f"/vevent/{test_event.id}/venue-request",
        json={"action": "approved", "response": "Sure"},
        headers=other_owner_headers,
    )
    assert response.status_code == 403
    assert response.json()["error"] == "forbidden"

    detail = (await client.get(f"/events/{test_event.id}")).json()
    assert detail["status"] == "pending"
    assert detail["venue_request"]["status"] == "pending"
    assert detail["venue_request"]["response"] is None


@pytest.mark.asyncio
async def test_organizer_cannot_decide(client: AsyncClient, test_event, organizer_headers):
    response = await client.patch(
        f"/vevent/{test_event.id}/venue-request",
        json={"action": "approved"},
        headers=organizer_headers,
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_decided_request_is_final(client: AsyncClient, test_event, owner_headers):
    first = await client.patch(
        f"/vevent/{test_event.id}/venue-request",
        json={"action": "approved"},
        headers=owner_headers,
    )
    assert first.status_code == 200

    second = await client.patch(
        f"/vevent/{test_event.id}/venue-request",
        json={"action": "rejected", "response": "Changed my mind"},
        headers=owner_headers,
    )
    assert second.status_code == 409
    body = second.json()
    assert body["error"] == "invalid_transition"
    assert body["context"] == {"current": "approved", "requested": "rejected"}

    detail = (await client.get(f"/events/{test_event.id}")).json()
    assert detail["venue_request"]["status"] == "approved"


@pytest.mark.asyncio
async def test_unknown_action_is_rejected(client: AsyncClient, test_event, owner_headers):
    response = await client.patch(
        f"/vevent/{test_event.id}/venue-request",
        json={"action": "pending"},
        headers=owner_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_decide_unknown_event(client: AsyncClient, owner_headers, test_venue):
    response = await client.patch(
        "/vevent/99999/venue-request",
        json={"action": "approved"},
        headers=owner_headers,
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_pending_requests(client: AsyncClient, test_event, owner_headers):
    response = await client.get("/event/venue-requests", headers=owner_headers)
    assert response.status_code == 200
    assert [e["id"] for e in response.json()] == [test_event.id]

    await client.patch(
        f"/vevent/{test_event.id}/venue-request",
        json={"action": "approved"},
        headers=owner_headers,
    )
    response = await client.get("/event/venue-requests", headers=owner_headers)
    assert response.json() == []


@pytest.mark.asyncio
async def test_list_pending_requests_without_venues(client: AsyncClient, other_owner_headers):
    response = await client.get("/event/venue-requests", headers=other_owner_headers)
    assert response.status_code == 404
