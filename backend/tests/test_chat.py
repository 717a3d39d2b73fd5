from conftest import auth_headers


def _session(client, headers, **body):
    return client.post("/api/chat/sessions", json=body, headers=headers).json()["data"]


def test_create_session_default_title(client, headers):
    session = _session(client, headers, sessionType="style_advice")
    assert session["title"] == "style_advice session"
    assert session["messages"] == []


def test_send_message_appends_reply(client, headers):
    session = _session(client, headers, sessionType="outfit_help")

    response = client.post(
        f"/api/chat/sessions/{session['id']}/messages", json={"content": "What goes with jeans?"}, headers=headers
    )
    data = response.json()["data"]
    assert data["userMessage"] == "What goes with jeans?"
    assert data["aiResponse"].startswith("For outfit suggestions")

    history = client.get(f"/api/chat/sessions/{session['id']}/history", headers=headers).json()["data"]
    assert history["totalMessages"] == 2
    assert [m["role"] for m in history["messages"]] == ["user", "assistant"]


def test_message_type_overrides_session_type(client, headers):
    session = _session(client, headers)
    response = client.post(
        f"/api/chat/sessions/{session['id']}/messages",
        json={"content": "Any tips?", "sessionType": "style_advice"},
        headers=headers,
    )
    assert response.json()["data"]["aiResponse"].startswith("Based on your question about style")


def test_sessions_listed_by_last_message(client, headers):
    older = _session(client, headers, title="Older")
    _session(client, headers, title="Newer")
    client.post(f"/api/chat/sessions/{older['id']}/messages", json={"content": "hi"}, headers=headers)

    sessions = client.get("/api/chat/sessions", headers=headers).json()["data"]["sessions"]
    assert [s["title"] for s in sessions] == ["Older", "Newer"]
    assert sessions[0]["messageCount"] == 2


def test_other_users_session_is_hidden(client, headers, other_user):
    session = _session(client, headers)
    response = client.get(f"/api/chat/sessions/{session['id']}", headers=auth_headers(other_user))
    assert response.status_code == 404
    assert response.json()["message"] == "Chat session not found or access denied"


def test_empty_message_rejected(client, headers):
    session = _session(client, headers)
    response = client.post(f"/api/chat/sessions/{session['id']}/messages", json={"content": ""}, headers=headers)
    assert response.status_code == 400
