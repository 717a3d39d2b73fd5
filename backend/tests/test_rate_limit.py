import pytest

from fashion_api.core.rate_limit import limiter


@pytest.fixture()
def settings(settings):
    settings.RATE_LIMIT_ENABLED = True
    return settings


@pytest.fixture(autouse=True)
def fresh_counters():
    limiter.reset()
    yield
    limiter.reset()


def test_auth_routes_share_a_limit(client, headers):
    for _ in range(3):
        assert client.get("/api/auth/me", headers=headers).status_code == 200
    for _ in range(2):
        assert client.get("/api/auth/validate", headers=headers).status_code == 200

    response = client.get("/api/auth/me", headers=headers)
    assert response.status_code == 429
    assert response.json() == {
        "success": False,
        "message": "Too many authentication attempts, please try again later.",
    }


def test_health_is_exempt(client):
    for _ in range(10):
        assert client.get("/health").status_code == 200
