from tests.conftest import CHAT_ID
from tests.fakes import FakeNotifier, broken_store


def test_root_welcome(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == "Welcome to our application!"


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_form_page_renders(client):
    response = client.get("/form")

    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert 'name="email"' in response.text
    assert 'name="checkbox1"' in response.text


def test_stylesheet_is_served(client):
    response = client.get("/static/css/style.css")
    assert response.status_code == 200


def test_submit_json(client, store, notifier, valid_payload):
    response = client.post("/form", json=valid_payload)

    assert response.status_code == 200
    assert response.text == "User data successfully saved"
    doc = store.documents["u1"]
    assert doc["email"] == "ann@x.com"
    assert doc["checkbox1"] is True
    assert "createdAt" in doc
    assert notifier.sent == [(CHAT_ID, "New user registered:\nName: Ann\nEmail: ann@x.com")]


def test_surrounding_whitespace_is_not_stored(client, store, notifier, valid_payload):
    response = client.post(
        "/form",
        json={**valid_payload, "email": "  ann@x.com  ", "mobile": " +14155550100 "},
    )

    assert response.status_code == 200
    assert store.documents["u1"]["email"] == "ann@x.com"
    assert store.documents["u1"]["mobile"] == "+14155550100"
    assert notifier.sent[0][1].endswith("Email: ann@x.com")


def test_submit_urlencoded_form(client, store):
    response = client.post(
        "/form",
        data={
            "id": "u2",
            "name": "Bo",
            "email": "bo@x.com",
            "mobile": "+44 7911 123456",
            "checkbox1": "on",
        },
    )

    assert response.status_code == 200
    assert store.documents["u2"]["checkbox1"] is True


def test_invalid_email_returns_400_without_side_effects(client, store, notifier, valid_payload):
    response = client.post("/form", json={**valid_payload, "email": "not-an-email"})

    assert response.status_code == 400
    assert response.text == "Error processing form: Invalid email"
    assert store.documents == {}
    assert notifier.sent == []


def test_invalid_mobile_returns_400(client, store, valid_payload):
    response = client.post("/form", json={**valid_payload, "mobile": "call me"})

    assert response.status_code == 400
    assert "Invalid mobile number" in response.text
    assert store.writes == 0


def test_storage_failure_returns_400(make_client, notifier, valid_payload):
    client = make_client(store=broken_store())

    response = client.post("/form", json=valid_payload)

    assert response.status_code == 400
    assert response.text == "Error processing form: Error writing user data"
    assert notifier.sent == []


def test_notify_failure_returns_400_but_keeps_document(make_client, store, valid_payload):
    client = make_client(notifier=FakeNotifier(fail=True))

    response = client.post("/form", json=valid_payload)

    assert response.status_code == 400
    assert response.text.startswith("Error processing form: Telegram API error")
    assert "u1" in store.documents


def test_resubmission_overwrites(client, store, notifier, valid_payload):
    client.post("/form", json=valid_payload)
    client.post("/form", json={**valid_payload, "name": "Annie"})

    assert len(store.documents) == 1
    assert store.documents["u1"]["name"] == "Annie"
    assert len(notifier.sent) == 2


def test_malformed_json_body_returns_400(client, store):
    response = client.post(
        "/form",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400
    assert response.text.startswith("Error processing form:")
    assert store.writes == 0
