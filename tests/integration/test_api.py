"""
Tests de integración de la API HTTP.
"""

import uuid

import pytest

from reviewflow.core.exceptions import StorageError
from reviewflow.services import review_service


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Process-Time" in response.headers


@pytest.mark.asyncio
async def test_missing_token_is_rejected(client):
    response = await client.get("/api/reviews")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_unknown_token_is_rejected(client):
    response = await client.get("/api/reviews", headers={"Authorization": "Bearer rvf_nope"})

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_review_flow(client, auth_headers):
    response = await client.post(
        "/api/reviews",
        json={"author_name": "Ana", "rating": 2, "review_text": "Slow service"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    body = response.json()
    assert body["negative_alert"] is True
    review_id = body["review"]["id"]
    assert body["review"]["status"] == "pending"

    response = await client.post(f"/api/reviews/{review_id}/auto-respond", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["response_text"]

    response = await client.patch(f"/api/reviews/{review_id}/status", json={"status": "archived"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "archived"

    response = await client.post(
        f"/api/reviews/{review_id}/respond", json={"response_text": "Call us"}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["status"] == "responded"
    assert response.json()["response_text"] == "Call us"

    response = await client.get("/api/reviews", params={"status": "responded"}, headers=auth_headers)
    assert response.json()["count"] == 1


@pytest.mark.asyncio
async def test_invalid_status_is_rejected(client, auth_headers):
    response = await client.post("/api/reviews", json={"author_name": "Ana", "rating": 5}, headers=auth_headers)
    review_id = response.json()["review"]["id"]

    response = await client.patch(f"/api/reviews/{review_id}/status", json={"status": "deleted"}, headers=auth_headers)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_duplicate_external_id_reports_field(client, auth_headers):
    payload = {"author_name": "Ana", "rating": 5, "external_id": "google-123"}
    await client.post("/api/reviews", json=payload, headers=auth_headers)

    response = await client.post("/api/reviews", json=payload, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["field"] == "external_id"


@pytest.mark.asyncio
async def test_missing_review_is_not_found(client, auth_headers):
    response = await client.get(f"/api/reviews/{uuid.uuid4()}", headers=auth_headers)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_other_users_review_is_not_found(client, auth_headers, other_user):
    response = await client.post("/api/reviews", json={"author_name": "Ana", "rating": 5}, headers=auth_headers)
    review_id = response.json()["review"]["id"]

    response = await client.delete(
        f"/api/reviews/{review_id}", headers={"Authorization": f"Bearer {other_user.api_key}"}
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_storage_failure_is_retryable(client, auth_headers, monkeypatch):
    async def failing_list(*args, **kwargs):
        raise StorageError("Storage operation failed")

    monkeypatch.setattr(review_service, "list_reviews", failing_list)

    response = await client.get("/api/reviews", headers=auth_headers)

    assert response.status_code == 503
    assert response.json()["retryable"] is True


@pytest.mark.asyncio
async def test_templates_keep_single_default(client, auth_headers):
    for name in ("First", "Second"):
        response = await client.post(
            "/api/automation/templates",
            json={"name": name, "template_text": f"{name} thanks", "rating_range": "4-5", "is_default": True},
            headers=auth_headers,
        )
        assert response.status_code == 201

    response = await client.get("/api/automation/templates", headers=auth_headers)
    defaults = [t["name"] for t in response.json()["templates"] if t["is_default"]]
    assert defaults == ["Second"]

    response = await client.post("/api/reviews", json={"author_name": "Ana", "rating": 5}, headers=auth_headers)
    review_id = response.json()["review"]["id"]
    response = await client.post(f"/api/reviews/{review_id}/auto-respond", headers=auth_headers)
    assert response.json()["response_text"] == "Second thanks"


@pytest.mark.asyncio
async def test_campaign_flow(client, auth_headers):
    response = await client.post(
        "/api/campaigns",
        json={"name": "Follow-up", "type": "email", "message_template": "Hi {customer_name}"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    campaign_id = response.json()["id"]

    response = await client.post(
        f"/api/campaigns/{campaign_id}/recipients",
        json={"recipients": [{"name": "Alice", "email": "alice@example.com"}, {"name": "Bob"}]},
        headers=auth_headers,
    )
    assert response.status_code == 201
    recipient_id = response.json()[0]["id"]

    response = await client.post(f"/api/campaigns/{campaign_id}/send", headers=auth_headers)
    assert response.json() == {"campaign_id": campaign_id, "dispatched": 2, "total_sent": 2}

    response = await client.post(f"/api/campaigns/{campaign_id}/send", headers=auth_headers)
    assert response.json()["dispatched"] == 0
    assert response.json()["total_sent"] == 2

    response = await client.post(
        f"/api/campaigns/{campaign_id}/recipients/{recipient_id}/convert", headers=auth_headers
    )
    assert response.json()["recorded"] is True

    response = await client.get(f"/api/campaigns/{campaign_id}", headers=auth_headers)
    detail = response.json()
    assert detail["total_collected"] == 1
    assert {r["status"] for r in detail["recipients"]} == {"sent"}

    response = await client.get("/api/analytics/campaign-performance", headers=auth_headers)
    assert response.json()["performance"][0]["conversion_rate"] == 50.0


@pytest.mark.asyncio
async def test_analytics_endpoints(client, auth_headers):
    for rating in (5, 5, 3, 2, 1):
        await client.post("/api/reviews", json={"author_name": "Ana", "rating": rating}, headers=auth_headers)

    dashboard = (await client.get("/api/analytics/dashboard", headers=auth_headers)).json()["stats"]
    assert dashboard["totalReviews"] == 5
    assert dashboard["responseRate"] == 0

    distribution = (await client.get("/api/analytics/rating-distribution", headers=auth_headers)).json()
    assert [d["rating"] for d in distribution["distribution"]] == [5, 3, 2, 1]

    report = (await client.get("/api/analytics/monthly-report", headers=auth_headers)).json()["report"]
    assert report["positive_reviews"] == 2
    assert report["negative_reviews"] == 2

    trends = (await client.get("/api/analytics/trends", params={"period": 7}, headers=auth_headers)).json()
    assert sum(t["count"] for t in trends["trends"]) == 5


@pytest.mark.asyncio
async def test_automation_settings(client, auth_headers):
    response = await client.get("/api/automation/settings", headers=auth_headers)
    assert response.json()["negative_threshold"] == 3

    response = await client.put(
        "/api/automation/settings", json={"negative_threshold": 1}, headers=auth_headers
    )
    assert response.json()["negative_threshold"] == 1
    assert response.json()["auto_response_enabled"] is True

    response = await client.post("/api/reviews", json={"author_name": "Ana", "rating": 2}, headers=auth_headers)
    assert response.json()["negative_alert"] is False


@pytest.mark.asyncio
async def test_profile_and_subscription(client, auth_headers):
    response = await client.put("/api/user/profile", json={"company_name": "Acme"}, headers=auth_headers)
    assert response.json()["company_name"] == "Acme"

    response = await client.put("/api/user/subscription", json={"plan": "basic"}, headers=auth_headers)
    assert response.json()["subscription_plan"] == "basic"

    response = await client.put("/api/user/subscription", json={"plan": "platinum"}, headers=auth_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_demo_user_setup(client):
    response = await client.post("/setup/demo-user")

    assert response.status_code == 200
    api_key = response.json()["api_key"]

    response = await client.get("/api/reviews", headers={"Authorization": f"Bearer {api_key}"})
    assert response.json()["count"] == 5


@pytest.mark.asyncio
async def test_empty_external_id_is_not_a_conflict(client, auth_headers):
    payload = {"author_name": "Ana", "rating": 5, "external_id": ""}

    first = await client.post("/api/reviews", json=payload, headers=auth_headers)
    second = await client.post("/api/reviews", json=payload, headers=auth_headers)

    assert first.status_code == 201
    assert second.status_code == 201
    assert second.json()["review"]["external_id"] is None


@pytest.mark.asyncio
async def test_review_date_with_offset_is_stored_in_utc(client, auth_headers):
    response = await client.post(
        "/api/reviews",
        json={"author_name": "Ana", "rating": 5, "review_date": "2026-03-31T23:00:00-05:00"},
        headers=auth_headers,
    )

    assert response.status_code == 201
    assert response.json()["review"]["review_date"].startswith("2026-04-01T04:00:00")
