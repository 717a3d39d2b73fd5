"""
Profile, settings, stats and data export for the signed-in user.
"""
from fashion_api.models import User


def test_profile_update_merges_documents(client, headers):
    response = client.put(
        "/api/users/profile",
        json={
            "displayName": "Alice A.",
            "profile": {"bio": "Likes linen"},
            "preferences": {"occasionPreferences": {"work": True}},
        },
        headers=headers,
    )
    user = response.json()["data"]
    assert user["displayName"] == "Alice A."
    assert user["profile"]["bio"] == "Likes linen"
    assert user["profile"]["stylePreferences"] == []
    assert user["preferences"]["occasionPreferences"]["work"] is True
    assert user["preferences"]["occasionPreferences"]["casual"] is True


def test_profile_update_rejects_young_age(client, headers):
    response = client.put("/api/users/profile", json={"profile": {"age": 9}}, headers=headers)
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "profile.age"


def test_delete_profile_deactivates(client, db, user, headers):
    response = client.delete("/api/users/profile", headers=headers)
    assert response.json()["message"] == "Account deactivated successfully"

    db.expire_all()
    assert db.get(User, user.id).is_active is False
    assert client.get("/api/users/profile", headers=headers).status_code == 401


def test_settings_roundtrip(client, headers):
    response = client.put("/api/users/settings", json={"theme": "dark"}, headers=headers)
    settings = response.json()["data"]["settings"]
    assert settings["theme"] == "dark"
    assert settings["language"] == "en"
    assert client.get("/api/users/settings", headers=headers).json()["data"]["subscription"]["plan"] == "free"


def test_profile_picture_needs_storage(client, headers):
    response = client.post(
        "/api/users/profile/picture",
        files={"picture": ("me.png", b"\x89PNG", "image/png")},
        headers=headers,
    )
    assert response.status_code == 500
    assert response.json()["message"].startswith("Image storage not configured")


def test_stats(client, user, headers, make_wardrobe, make_item):
    wardrobe = make_wardrobe(user)
    make_item(user, wardrobe, category="dresses")
    make_item(user, wardrobe, category="dresses")
    make_item(user, wardrobe, category="shorts")

    stats = client.get("/api/users/stats", headers=headers).json()["data"]
    assert stats["totalWardrobes"] == 1
    assert stats["totalItems"] == 3
    assert stats["categoryStats"] == {"dresses": 2, "shorts": 1}
    assert stats["accountAge"] >= 0


def test_overview_and_detailed_stats(client, user, headers, make_wardrobe, make_item):
    wardrobe = make_wardrobe(user, "Main")
    make_item(user, wardrobe, name="Skirt", category="skirts")
    client.post("/api/outfits", json={"name": "Look", "items": ["x"], "occasion": "date"}, headers=headers)

    overview = client.get("/api/database/overview", headers=headers).json()["data"]
    assert overview["user_data"] == {"wardrobes": 1, "clothing_items": 1, "outfits": 1, "chat_sessions": 0}
    assert overview["recent_activity"]["latest_item"]["name"] == "Skirt"
    assert overview["recent_activity"]["latest_chat"] is None

    detailed = client.get("/api/database/stats/detailed", headers=headers).json()["data"]
    assert detailed["category_breakdown"] == [{"_id": "skirts", "count": 1}]
    assert detailed["occasion_breakdown"] == [{"_id": "date", "count": 1}]
    assert detailed["monthly_activity"][0]["items_added"] == 1


def test_export(client, user, other_user, headers, make_wardrobe):
    make_wardrobe(user, "Mine")
    make_wardrobe(other_user, "Theirs")

    body = client.get("/api/database/export", headers=headers).json()
    assert body["format_version"] == "1.0"
    assert [w["name"] for w in body["data"]["wardrobes"]] == ["Mine"]
    assert body["data"]["user"]["id"] == user.id


def test_database_health_for_user(client, headers):
    database = client.get("/api/database/health", headers=headers).json()["database"]
    assert database["connected"] is True
    assert database["stats"]["users"] == 1


def test_profile_update_rejects_null_username(client, headers):
    response = client.put("/api/users/profile", json={"username": None}, headers=headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"


def test_profile_update_duplicate_username(client, headers, other_user):
    response = client.put("/api/users/profile", json={"username": other_user.username}, headers=headers)
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "username already exists"}
