"""API tests for administration endpoints."""

import pytest

from recipebox.models import Tier


def _headers(user):
    return {"X-User-Id": user.id}


def test_admin_endpoints_require_admin(client, tier2_user):
    assert client.get("/api/admin/users", headers=_headers(tier2_user)).status_code == 403
    assert client.get("/api/admin/stats").status_code == 401


def test_list_users_filters(client, admin_user, free_user, tier1_user):
    response = client.get("/api/admin/users", params={"subscription_tier": 1}, headers=_headers(admin_user))
    assert [u["id"] for u in response.json()] == [tier1_user.id]

    response = client.get("/api/admin/users", params={"email": free_user.email[:6]}, headers=_headers(admin_user))
    assert [u["id"] for u in response.json()] == [free_user.id]


def test_user_details_counts(client, admin_user, free_user, make_recipe):
    make_recipe(free_user)
    make_recipe(free_user, name="Second")
    data = client.get(f"/api/admin/users/{free_user.id}", headers=_headers(admin_user)).json()
    assert data["user"]["email"] == free_user.email
    assert data["recipe_count"] == 2
    assert data["cookbook_count"] == 0


def test_user_details_missing(client, admin_user):
    response = client.get("/api/admin/users/missing", headers=_headers(admin_user))
    assert response.status_code == 404


def test_update_user(client, admin_user, free_user):
    response = client.patch(
        f"/api/admin/users/{free_user.id}",
        json={"subscription_tier": 2, "subscription_status": "trial"},
        headers=_headers(admin_user),
    )
    assert response.status_code == 200
    assert response.json()["subscription_tier"] == 2
    assert response.json()["subscription_status"] == "trial"


def test_update_user_rejects_bad_values(client, admin_user, free_user, tier1_user):
    url = f"/api/admin/users/{free_user.id}"
    bad_tier = client.patch(url, json={"subscription_tier": 5}, headers=_headers(admin_user))
    assert bad_tier.status_code == 400

    bad_status = client.patch(url, json={"subscription_status": "paused"}, headers=_headers(admin_user))
    assert bad_status.status_code == 400

    taken = client.patch(url, json={"email": tier1_user.email}, headers=_headers(admin_user))
    assert taken.status_code == 400
    assert taken.json()["error"]["message"] == "Email is already in use"


@pytest.mark.parametrize("field", ["name", "email", "subscription_tier", "subscription_status"])
def test_update_user_rejects_null(client, admin_user, free_user, field):
    response = client.patch(f"/api/admin/users/{free_user.id}", json={field: None}, headers=_headers(admin_user))
    assert response.status_code == 422
    assert client.get(f"/api/admin/users/{free_user.id}", headers=_headers(admin_user)).json()["user"]["name"] == "Free"


def test_toggle_override_grants_unlimited(client, admin_user, free_user):
    response = client.post(f"/api/admin/users/{free_user.id}/override", headers=_headers(admin_user))
    assert response.json()["admin_override"] is True

    profile = client.get("/api/me", headers=_headers(free_user)).json()
    assert profile["entitlements"]["max_cookbooks"] == -1
    assert profile["entitlements"]["has_tier2_access"] is True


def test_admin_plans_include_admin_tier(client, admin_user):
    plans = client.get("/api/admin/plans", headers=_headers(admin_user)).json()
    assert [p["tier"] for p in plans] == [0, 1, 2, int(Tier.ADMIN)]


def test_stats(client, admin_user, free_user, tier1_user, make_recipe, make_cookbook):
    make_recipe(free_user)
    make_cookbook(tier1_user)
    stats = client.get("/api/admin/stats", headers=_headers(admin_user)).json()
    assert stats == {
        "total_users": 3,
        "total_recipes": 1,
        "total_cookbooks": 1,
        "users_by_tier": {"free": 1, "tier1": 1, "tier2": 0, "admin": 1},
    }
