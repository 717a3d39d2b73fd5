"""
Clothing items: multipart create, listing, updates and similarity.
"""
from fashion_api.models import Wardrobe

from conftest import FakeResponse


def _create(client, headers, wardrobe, **fields):
    data = {"wardrobeId": wardrobe.id, "name": "Tee", "category": "tshirts_tops", "color": "blue"}
    data.update(fields)
    return client.post("/api/clothing", data=data, headers=headers)


def test_create_without_image_uses_placeholder(client, db, user, headers, make_wardrobe):
    wardrobe = make_wardrobe(user)
    response = _create(client, headers, wardrobe, isFavorite="true", timesWorn="3")

    assert response.status_code == 201
    item = response.json()["data"]
    assert item["imageUrl"] == "/images/fallback-item.jpg"
    assert item["userMetadata"]["isFavorite"] is True
    assert item["userMetadata"]["timesWorn"] == 3
    assert item["attributes"]["colors"] == ["blue"]
    assert item["aiClassification"]["confidence"] == 0.5

    db.expire_all()
    assert db.get(Wardrobe, wardrobe.id).items == [item["id"]]


def test_tags_keep_their_order(client, user, headers, make_wardrobe):
    wardrobe = make_wardrobe(user)
    tags = ["summer", "basic", "cotton"]
    created = _create(client, headers, wardrobe, **{"tags[]": tags}).json()["data"]

    fetched = client.get(f"/api/clothing/{created['id']}", headers=headers).json()["data"]
    assert fetched["userMetadata"]["userTags"] == tags


def test_create_classifies_uploaded_image(client, user, headers, make_wardrobe, ai_session):
    ai_session.queue(FakeResponse(200, {
        "success": True,
        "classification": {"predicted_class": "tshirts_tops", "confidence": 0.91},
        "attributes": {"patterns": ["striped"]},
    }))
    wardrobe = make_wardrobe(user)
    response = client.post(
        "/api/clothing",
        data={"wardrobeId": wardrobe.id, "name": "Tee", "category": "tshirts_tops", "color": "blue"},
        files={"image": ("tee.jpg", b"\xff\xd8\xff fake jpeg", "image/jpeg")},
        headers=headers,
    )

    assert response.status_code == 201
    item = response.json()["data"]
    assert item["aiClassification"]["confidence"] == 0.91
    assert item["attributes"]["patterns"] == ["striped"]
    assert ai_session.calls[0]["url"] == "http://ai.test/api/classify"


def test_create_survives_ai_outage(client, user, headers, make_wardrobe):
    wardrobe = make_wardrobe(user)
    response = client.post(
        "/api/clothing",
        data={"wardrobeId": wardrobe.id, "name": "Tee", "category": "tshirts_tops", "color": "blue"},
        files={"image": ("tee.jpg", b"\xff\xd8\xff fake jpeg", "image/jpeg")},
        headers=headers,
    )
    assert response.status_code == 201
    assert response.json()["data"]["aiClassification"]["confidence"] == 0.5


def test_create_rejects_non_image(client, user, headers, make_wardrobe):
    wardrobe = make_wardrobe(user)
    response = client.post(
        "/api/clothing",
        data={"wardrobeId": wardrobe.id, "name": "Tee", "category": "tshirts_tops", "color": "blue"},
        files={"image": ("notes.txt", b"hello", "text/plain")},
        headers=headers,
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Only image files are allowed"


def test_create_in_foreign_wardrobe(client, other_user, headers, make_wardrobe):
    wardrobe = make_wardrobe(other_user)
    response = _create(client, headers, wardrobe)
    assert response.status_code == 404


def test_create_rejects_unknown_category(client, user, headers, make_wardrobe):
    wardrobe = make_wardrobe(user)
    response = _create(client, headers, wardrobe, category="hats")
    assert response.status_code == 400


def test_list_pagination(client, user, headers, make_wardrobe, make_item):
    wardrobe = make_wardrobe(user)
    for n in range(12):
        make_item(user, wardrobe, name=f"Item {n}")

    response = client.get("/api/clothing", params={"page": 2, "limit": 5}, headers=headers)
    data = response.json()["data"]
    assert len(data["items"]) == 5
    assert data["pagination"] == {"total": 12, "page": 2, "limit": 5, "pages": 3, "hasMore": True}

    last = client.get("/api/clothing", params={"page": 3, "limit": 5}, headers=headers).json()["data"]
    assert len(last["items"]) == 2
    assert last["pagination"]["hasMore"] is False


def test_list_filters_by_category(client, user, headers, make_wardrobe, make_item):
    wardrobe = make_wardrobe(user)
    make_item(user, wardrobe, category="dresses")
    make_item(user, wardrobe, category="shorts")

    items = client.get("/api/clothing", params={"category": "dresses"}, headers=headers).json()["data"]["items"]
    assert [i["category"] for i in items] == ["dresses"]


def test_foreign_item_is_not_found(client, other_user, headers, make_wardrobe, make_item):
    item = make_item(other_user, make_wardrobe(other_user))
    response = client.get(f"/api/clothing/{item.id}", headers=headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Clothing item not found or access denied"


def test_update_merges_metadata_and_moves_wardrobe(client, db, user, headers, make_wardrobe, make_item):
    source = make_wardrobe(user, "Source")
    target = make_wardrobe(user, "Target")
    item = make_item(user, source, tags=["old"])

    response = client.put(
        f"/api/clothing/{item.id}",
        json={"wardrobeId": target.id, "tags": ["new"], "userMetadata": {"notes": "dry clean"}},
        headers=headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["wardrobeId"] == target.id
    assert data["userMetadata"]["userTags"] == ["new"]
    assert data["userMetadata"]["notes"] == "dry clean"
    assert data["userMetadata"]["timesWorn"] == 0

    db.expire_all()
    assert db.get(Wardrobe, source.id).items == []
    assert db.get(Wardrobe, target.id).items == [item.id]


def test_delete_prunes_wardrobe(client, db, user, headers, make_wardrobe, make_item):
    wardrobe = make_wardrobe(user)
    item = make_item(user, wardrobe)

    assert client.delete(f"/api/clothing/{item.id}", headers=headers).status_code == 200
    db.expire_all()
    assert db.get(Wardrobe, wardrobe.id).items == []


def test_bulk_update_requires_ownership_of_every_item(
    client, user, other_user, headers, make_wardrobe, make_item
):
    mine = make_item(user, make_wardrobe(user))
    theirs = make_item(other_user, make_wardrobe(other_user))

    response = client.patch(
        "/api/clothing/bulk-update",
        json={"itemIds": [mine.id, theirs.id], "updates": {"color": "red"}},
        headers=headers,
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Some items not found or access denied"


def test_bulk_update(client, user, headers, make_wardrobe, make_item):
    wardrobe = make_wardrobe(user)
    items = [make_item(user, wardrobe) for _ in range(3)]

    response = client.patch(
        "/api/clothing/bulk-update",
        json={"itemIds": [i.id for i in items], "updates": {"color": "red"}},
        headers=headers,
    )
    assert response.json()["data"] == {"modified": 3, "matched": 3}
    listed = client.get("/api/clothing", headers=headers).json()["data"]["items"]
    assert {i["color"] for i in listed} == {"red"}


def test_favorite_toggle(client, user, headers, make_wardrobe, make_item):
    item = make_item(user, make_wardrobe(user))
    response = client.patch(f"/api/clothing/{item.id}/favorite", json={"isFavorite": True}, headers=headers)
    assert response.json()["data"]["userMetadata"]["isFavorite"] is True


def test_classify_placeholder_item(client, user, headers, make_wardrobe, make_item):
    item = make_item(user, make_wardrobe(user), category="dresses")
    response = client.post(f"/api/clothing/{item.id}/classify", headers=headers)

    classification = response.json()["data"]["classification"]
    assert classification["predicted_class"] == "dresses"
    assert classification["confidence"] == 0.85


def test_similar_falls_back_to_category(client, user, headers, make_wardrobe, make_item):
    wardrobe = make_wardrobe(user)
    base = make_item(user, wardrobe, category="dresses")
    make_item(user, wardrobe, category="dresses")
    make_item(user, wardrobe, category="dresses")
    make_item(user, wardrobe, category="shoes_formal")

    data = client.get(f"/api/clothing/{base.id}/similar", headers=headers).json()["data"]
    assert data["note"] == "Using category-based similarity (AI service unavailable)"
    assert len(data["similarItems"]) == 2
    for entry in data["similarItems"]:
        assert entry["category"] == "dresses"
        assert 0.7 <= entry["similarityScore"] < 1.0


def test_similar_uses_engine_scores_for_own_items(
    client, user, other_user, headers, make_wardrobe, make_item, ai_session
):
    wardrobe = make_wardrobe(user)
    base = make_item(user, wardrobe)
    match = make_item(user, wardrobe)
    foreign = make_item(other_user, make_wardrobe(other_user))
    ai_session.queue(FakeResponse(200, {"similar_items": [
        {"item_id": match.id, "similarity_score": 0.93},
        {"item_id": foreign.id, "similarity_score": 0.88},
    ]}))

    data = client.get(f"/api/clothing/{base.id}/similar", headers=headers).json()["data"]
    assert "note" not in data
    assert [(i["id"], i["similarityScore"]) for i in data["similarItems"]] == [(match.id, 0.93)]


def test_update_rejects_null_color(client, user, headers, make_wardrobe, make_item):
    item = make_item(user, make_wardrobe(user), color="green")
    response = client.put(f"/api/clothing/{item.id}", json={"color": None}, headers=headers)

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "color"
    assert client.get(f"/api/clothing/{item.id}", headers=headers).json()["data"]["color"] == "green"


def test_bulk_update_rejects_null_name(client, user, headers, make_wardrobe, make_item):
    item = make_item(user, make_wardrobe(user))
    response = client.patch(
        "/api/clothing/bulk-update",
        json={"itemIds": [item.id], "updates": {"name": None}},
        headers=headers,
    )
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "updates.name"
