def test_send_message_validation(api, trainer):
    response = api.post("/api/messages", json={"receiverId": "someone"}, headers=trainer["headers"])
    assert response.status_code == 400
    assert response.json()["detail"] == "Receiver ID and content are required"

    response = api.post("/api/messages", json={"receiverId": "ghost", "content": "hi"}, headers=trainer["headers"])
    assert response.status_code == 404
    assert response.json()["detail"] == "Receiver not found"


def test_conversation_flow(api, trainer, linked_client):
    sent = api.post("/api/messages", json={"receiverId": linked_client["id"], "content": "Welcome aboard"},
                    headers=trainer["headers"])
    assert sent.status_code == 201
    assert sent.json()["read_status"] is False
    api.post("/api/messages", json={"receiverId": linked_client["id"], "content": "See you Monday"},
             headers=trainer["headers"])

    assert api.get("/api/messages/unread-count", headers=linked_client["headers"]).json() == {"count": 2}

    conversations = api.get("/api/messages", headers=linked_client["headers"]).json()
    assert len(conversations) == 1
    assert conversations[0]["id"] == trainer["id"]
    assert conversations[0]["unread_count"] == 2
    assert conversations[0]["last_message"] == "See you Monday"

    thread = api.get(f"/api/messages/{trainer['id']}", headers=linked_client["headers"]).json()
    assert [m["content"] for m in thread] == ["Welcome aboard", "See you Monday"]
    assert api.get("/api/messages/unread-count", headers=linked_client["headers"]).json() == {"count": 0}

    api.post("/api/messages", json={"receiverId": trainer["id"], "content": "Thanks!"},
             headers=linked_client["headers"])
    trainer_view = api.get("/api/messages", headers=trainer["headers"]).json()
    assert trainer_view[0]["name"] == linked_client["name"]
    assert trainer_view[0]["unread_count"] == 1
    assert trainer_view[0]["last_message"] == "Thanks!"


def test_client_without_trainer_has_no_conversations(api, client_user):
    assert api.get("/api/messages", headers=client_user["headers"]).json() == []
