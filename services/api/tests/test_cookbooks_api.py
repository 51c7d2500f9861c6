"""API tests for cookbooks and their ordered recipes."""


def _headers(user):
    return {"X-User-Id": user.id}


def _names(detail):
    return [r["name"] for r in detail["recipes"]]


def test_create_cookbook_with_refs(client, tier1_user, make_recipe):
    a = make_recipe(tier1_user, name="A")
    b = make_recipe(tier1_user, name="B")

    response = client.post("/api/cookbooks", json={
        "name": "Favourites",
        "recipe_refs": [{"recipe_id": a.id, "order": 1}, {"recipe_id": b.id, "order": 0}],
    }, headers=_headers(tier1_user))

    assert response.status_code == 201
    data = response.json()
    assert data["is_private"] is False
    assert _names(data) == ["B", "A"]
    assert [r["order"] for r in data["recipes"]] == [0, 1]


def test_free_user_second_cookbook_rejected(client, free_user):
    assert client.post("/api/cookbooks", json={"name": "One"}, headers=_headers(free_user)).status_code == 201

    response = client.post("/api/cookbooks", json={"name": "Two"}, headers=_headers(free_user))
    assert response.status_code == 403
    assert response.json()["error"]["details"]["resource"] == "cookbook"


def test_negative_ref_order_rejected(client, tier1_user, make_recipe):
    a = make_recipe(tier1_user)
    response = client.post("/api/cookbooks", json={
        "name": "Bad", "recipe_refs": [{"recipe_id": a.id, "order": -1}],
    }, headers=_headers(tier1_user))
    assert response.status_code == 422


def test_add_remove_reorder_flow(client, tier1_user, make_recipe, make_cookbook):
    a = make_recipe(tier1_user, name="A")
    b = make_recipe(tier1_user, name="B")
    c = make_recipe(tier1_user, name="C")
    cookbook = make_cookbook(tier1_user)
    url = f"/api/cookbooks/{cookbook.id}"

    response = client.post(f"{url}/recipes", json={"recipe_ids": [a.id]}, headers=_headers(tier1_user))
    assert _names(response.json()) == ["A"]

    response = client.post(f"{url}/recipes", json={"recipe_ids": [a.id, b.id, c.id]}, headers=_headers(tier1_user))
    assert response.json()["recipe_refs"] == [
        {"recipe_id": a.id, "order": 0},
        {"recipe_id": b.id, "order": 1},
        {"recipe_id": c.id, "order": 2},
    ]

    response = client.put(f"{url}/recipes/order", json={"recipe_order": {c.id: 0}}, headers=_headers(tier1_user))
    assert response.status_code == 200
    assert _names(response.json()) == ["C", "A", "B"]

    response = client.delete(f"{url}/recipes/{a.id}", headers=_headers(tier1_user))
    assert _names(response.json()) == ["C", "B"]


def test_reorder_rejects_negative(client, tier1_user, make_recipe, make_cookbook):
    a = make_recipe(tier1_user)
    cookbook = make_cookbook(tier1_user, recipe_refs=[{"recipe_id": a.id, "order": 0}])
    response = client.put(
        f"/api/cookbooks/{cookbook.id}/recipes/order",
        json={"recipe_order": {a.id: -1}},
        headers=_headers(tier1_user),
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_add_missing_recipe_is_404(client, tier1_user, make_cookbook):
    cookbook = make_cookbook(tier1_user)
    response = client.post(
        f"/api/cookbooks/{cookbook.id}/recipes", json={"recipe_ids": ["ghost"]}, headers=_headers(tier1_user)
    )
    assert response.status_code == 404


def test_other_user_cannot_edit(client, tier1_user, tier2_user, make_recipe, make_cookbook):
    recipe = make_recipe(tier2_user)
    cookbook = make_cookbook(tier1_user)
    response = client.post(
        f"/api/cookbooks/{cookbook.id}/recipes", json={"recipe_ids": [recipe.id]}, headers=_headers(tier2_user)
    )
    assert response.status_code == 403


def test_detail_skips_deleted_recipes(client, db_session, tier1_user, make_recipe, make_cookbook):
    a = make_recipe(tier1_user, name="A")
    b = make_recipe(tier1_user, name="B")
    cookbook = make_cookbook(tier1_user, recipe_refs=[
        {"recipe_id": a.id, "order": 0},
        {"recipe_id": b.id, "order": 1},
    ])
    assert client.delete(f"/api/recipes/{a.id}", headers=_headers(tier1_user)).status_code == 204

    response = client.get(f"/api/cookbooks/{cookbook.id}")
    assert response.status_code == 200
    assert _names(response.json()) == ["B"]


def test_detail_hides_private_recipes_of_others(client, tier1_user, tier2_user, make_recipe, make_cookbook):
    secret = make_recipe(tier2_user, name="Secret", is_private=True)
    shown = make_recipe(tier2_user, name="Shown")
    cookbook = make_cookbook(tier2_user, recipe_refs=[
        {"recipe_id": secret.id, "order": 0},
        {"recipe_id": shown.id, "order": 1},
    ])

    assert _names(client.get(f"/api/cookbooks/{cookbook.id}", headers=_headers(tier1_user)).json()) == ["Shown"]
    assert _names(client.get(f"/api/cookbooks/{cookbook.id}", headers=_headers(tier2_user)).json()) == ["Secret", "Shown"]


def test_private_cookbook_and_toggle(client, tier1_user, tier2_user, make_cookbook):
    cookbook = make_cookbook(tier2_user)

    response = client.post(f"/api/cookbooks/{cookbook.id}/privacy", headers=_headers(tier2_user))
    assert response.json()["is_private"] is True
    assert client.get(f"/api/cookbooks/{cookbook.id}").status_code == 403
    assert client.get("/api/cookbooks/public").json() == []

    own = make_cookbook(tier1_user)
    response = client.post(f"/api/cookbooks/{own.id}/privacy", headers=_headers(tier1_user))
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "PRIVACY_TIER_REQUIRED"


def test_patch_and_delete_cookbook(client, tier1_user, make_cookbook):
    cookbook = make_cookbook(tier1_user)
    url = f"/api/cookbooks/{cookbook.id}"

    response = client.patch(url, json={"description": "Sunday mornings"}, headers=_headers(tier1_user))
    assert response.json()["description"] == "Sunday mornings"

    assert client.delete(url, headers=_headers(tier1_user)).status_code == 204
    assert client.get(url).status_code == 404


def test_patch_cookbook_null_name_rejected(client, tier1_user, make_cookbook):
    cookbook = make_cookbook(tier1_user, name="Weeknights")
    url = f"/api/cookbooks/{cookbook.id}"

    response = client.patch(url, json={"name": None}, headers=_headers(tier1_user))
    assert response.status_code == 422
    assert client.get(url).json()["name"] == "Weeknights"

    cleared = client.patch(url, json={"description": None}, headers=_headers(tier1_user))
    assert cleared.status_code == 200
    assert cleared.json()["description"] is None


def test_list_own_cookbooks(client, tier1_user, tier2_user, make_cookbook):
    make_cookbook(tier1_user, name="Mine")
    make_cookbook(tier2_user, name="Theirs")
    response = client.get("/api/cookbooks", headers=_headers(tier1_user))
    assert [c["name"] for c in response.json()] == ["Mine"]


def test_export_cookbook(client, tier1_user, make_recipe, make_cookbook):
    a = make_recipe(tier1_user, name="Soup")
    b = make_recipe(tier1_user, name="Bread")
    cookbook = make_cookbook(tier1_user, name="Lunch", recipe_refs=[
        {"recipe_id": a.id, "order": 1},
        {"recipe_id": b.id, "order": 0},
    ])

    response = client.get(f"/api/cookbooks/{cookbook.id}/export/txt", headers=_headers(tier1_user))
    assert response.status_code == 200
    assert "1. Bread - Page 1\n2. Soup - Page 3\n" in response.text
    assert f'filename="cookbook_{cookbook.id}.txt"' in response.headers["content-disposition"]
