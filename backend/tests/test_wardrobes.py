"""
Wardrobe CRUD, default handling and sharing.
"""
from fashion_api.models import ClothingItem, Wardrobe

from conftest import auth_headers


def test_first_wardrobe_becomes_default(client, headers):
    first = client.post("/api/wardrobes", json={"name": "Everyday"}, headers=headers)
    second = client.post("/api/wardrobes", json={"name": "Gym"}, headers=headers)

    assert first.status_code == 201
    assert first.json()["data"]["isDefault"] is True
    assert second.json()["data"]["isDefault"] is False


def test_new_default_clears_previous(client, db, user, headers):
    first = client.post("/api/wardrobes", json={"name": "Everyday"}, headers=headers).json()["data"]
    client.post("/api/wardrobes", json={"name": "Work", "isDefault": True}, headers=headers)

    db.expire_all()
    defaults = db.query(Wardrobe).filter(Wardrobe.user_id == user.id, Wardrobe.is_default.is_(True)).all()
    assert [w.name for w in defaults] == ["Work"]
    assert db.get(Wardrobe, first["id"]).is_default is False


def test_update_cannot_unset_default(client, headers):
    wardrobe = client.post("/api/wardrobes", json={"name": "Everyday"}, headers=headers).json()["data"]
    response = client.put(
        f"/api/wardrobes/{wardrobe['id']}",
        json={"isDefault": False, "name": "Daily"},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["isDefault"] is True
    assert response.json()["data"]["name"] == "Daily"


def test_list_puts_default_first_with_preview(client, user, headers, make_wardrobe, make_item):
    main = make_wardrobe(user, "Main", is_default=True)
    make_wardrobe(user, "Spare")
    for n in range(7):
        make_item(user, main, name=f"Item {n}")

    response = client.get("/api/wardrobes", headers=headers)
    wardrobes = response.json()["data"]["wardrobes"]
    assert wardrobes[0]["name"] == "Main"
    assert len(wardrobes[0]["preview"]) == 5
    assert wardrobes[0]["itemCount"] == 7


def test_cannot_delete_default_wardrobe(client, user, headers, make_wardrobe):
    wardrobe = make_wardrobe(user, is_default=True)
    response = client.delete(f"/api/wardrobes/{wardrobe.id}", headers=headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Cannot delete default wardrobe"


def test_delete_removes_items(client, db, user, headers, make_wardrobe, make_item):
    make_wardrobe(user, "Main", is_default=True)
    spare_id = make_wardrobe(user, "Spare").id
    make_item(user, db.get(Wardrobe, spare_id))
    assert db.query(ClothingItem).filter(ClothingItem.wardrobe_id == spare_id).count() == 1

    response = client.delete(f"/api/wardrobes/{spare_id}", headers=headers)
    assert response.status_code == 200
    db.expire_all()
    assert db.get(Wardrobe, spare_id) is None
    assert db.query(ClothingItem).filter(ClothingItem.wardrobe_id == spare_id).count() == 0


def test_update_rejects_null_name(client, user, headers, make_wardrobe):
    wardrobe = make_wardrobe(user, "Main")
    response = client.put(f"/api/wardrobes/{wardrobe.id}", json={"name": None}, headers=headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"
    assert response.json()["errors"][0]["field"] == "name"
    assert client.get(f"/api/wardrobes/{wardrobe.id}", headers=headers).json()["data"]["name"] == "Main"


def test_update_may_clear_description(client, user, headers, make_wardrobe):
    wardrobe = make_wardrobe(user, "Main", description="Everyday clothes")
    response = client.put(f"/api/wardrobes/{wardrobe.id}", json={"description": None}, headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["description"] is None


def test_foreign_wardrobe_is_not_found(client, other_user, headers, make_wardrobe):
    wardrobe = make_wardrobe(other_user)
    response = client.get(f"/api/wardrobes/{wardrobe.id}", headers=headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Wardrobe not found or access denied"


def test_malformed_id(client, headers):
    response = client.get("/api/wardrobes/not-an-id", headers=headers)
    assert response.status_code == 400
    assert response.json()["errors"][0]["message"] == "Invalid ID format"


def test_share_makes_wardrobe_visible(client, user, other_user, headers, make_wardrobe):
    wardrobe = make_wardrobe(user, "Party")

    response = client.post(f"/api/wardrobes/{wardrobe.id}/share", json={"username": "bob"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["sharedWith"] == [other_user.id]

    bob = auth_headers(other_user)
    assert client.get(f"/api/wardrobes/{wardrobe.id}", headers=bob).status_code == 200
    shared = client.get("/api/wardrobes/shared", headers=bob).json()["data"]
    assert [w["owner"]["username"] for w in shared["wardrobes"]] == ["alice"]
    assert shared["pagination"]["total"] == 1


def test_share_with_unknown_user(client, user, headers, make_wardrobe):
    wardrobe = make_wardrobe(user)
    response = client.post(f"/api/wardrobes/{wardrobe.id}/share", json={"username": "ghost"}, headers=headers)
    assert response.status_code == 404
    assert response.json()["message"] == "User not found"
