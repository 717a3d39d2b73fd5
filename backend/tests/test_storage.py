"""
Image uploads with object storage enabled, against an in-memory S3 client.
"""
import pytest

from fashion_api.services.storage import ImageStorage

from conftest import FakeResponse, FakeS3

JPEG = ("tee.jpg", b"\xff\xd8\xff fake jpeg", "image/jpeg")


@pytest.fixture()
def settings(settings):
    settings.USE_OBJECT_STORAGE = True
    settings.S3_BUCKET_NAME = "wardrobe-images"
    return settings


@pytest.fixture()
def s3():
    return FakeS3()


def test_thumbnail_url(settings):
    storage = ImageStorage(settings, client=FakeS3())
    assert storage.thumbnail_url("items/a.jpg", size=200) == (
        "https://cdn.test/items/a.jpg?w=200&h=200&fit=fill&q=auto"
    )


def test_item_image_is_stored_and_removed(client, user, headers, make_wardrobe, s3):
    wardrobe = make_wardrobe(user)
    response = client.post(
        "/api/clothing",
        data={"wardrobeId": wardrobe.id, "name": "Tee", "category": "tshirts_tops", "color": "blue"},
        files={"image": JPEG},
        headers=headers,
    )
    item = response.json()["data"]
    key = item["imagePublicId"]
    assert item["imageUrl"] == f"https://cdn.test/{key}"
    assert key.startswith("fashion-ai/clothing-items/")
    assert s3.objects[key]["Metadata"] == {"tags": "clothing,tshirts_tops"}

    fetched = client.get(f"/api/clothing/{item['id']}", headers=headers).json()["data"]
    assert fetched["thumbnailUrl"].startswith(f"https://cdn.test/{key}?")

    client.delete(f"/api/clothing/{item['id']}", headers=headers)
    assert key not in s3.objects


def test_reclassify_stored_image(client, user, headers, make_wardrobe, s3, ai_session):
    wardrobe = make_wardrobe(user)
    item = client.post(
        "/api/clothing",
        data={"wardrobeId": wardrobe.id, "name": "Dress", "category": "tshirts_tops", "color": "red"},
        files={"image": JPEG},
        headers=headers,
    ).json()["data"]
    ai_session.queue(FakeResponse(200, {
        "success": True,
        "classification": {
            "predicted_class": "dresses",
            "confidence": 0.88,
            "all_predictions": [{"class": "dresses", "confidence": 0.88}],
        },
    }))

    data = client.post(f"/api/clothing/{item['id']}/classify", headers=headers).json()["data"]
    assert data["item"]["category"] == "dresses"
    assert data["item"]["aiClassification"]["allPredictions"] == [{"category": "dresses", "confidence": 0.88}]
    assert data["classification"]["classification"]["predicted_class"] == "dresses"


def test_reclassify_reports_engine_failure(client, user, headers, make_wardrobe, s3):
    wardrobe = make_wardrobe(user)
    item = client.post(
        "/api/clothing",
        data={"wardrobeId": wardrobe.id, "name": "Tee", "category": "tshirts_tops", "color": "blue"},
        files={"image": JPEG},
        headers=headers,
    ).json()["data"]

    response = client.post(f"/api/clothing/{item['id']}/classify", headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["classification"]["error"] == "Classification failed"


def test_profile_picture(client, headers, s3):
    response = client.post(
        "/api/users/profile/picture",
        files={"picture": ("me.png", b"\x89PNG", "image/png")},
        headers=headers,
    )
    data = response.json()["data"]
    assert data["profilePicture"].startswith("https://cdn.test/fashion-ai/profile-pictures/")
    assert data["user"]["profile"]["profilePicture"] == data["profilePicture"]
