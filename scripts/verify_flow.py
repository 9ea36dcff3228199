"""Smoke check against a running server: submit -> read -> patch -> read."""
import sys
import uuid

import requests

BASE_URL = "http://127.0.0.1:3000"


def submit_form(user_id):
    print(f"\n--- Submitting form for id: {user_id} ---")
    payload = {
        "id": user_id,
        "name": "Smoke Test",
        "email": "smoke.test@mail.com",
        "mobile": "+14155550100",
        "checkbox1": True,
    }
    response = requests.post(f"{BASE_URL}/form", json=payload, timeout=30)
    print(f"{response.status_code}: {response.text}")
    return response.status_code == 200


def fetch_user(user_id):
    print(f"\n--- Fetching user: {user_id} ---")
    response = requests.get(f"{BASE_URL}/user/{user_id}", timeout=30)
    if response.status_code == 200:
        data = response.json()
        for key in ("id", "name", "email", "mobile", "checkbox1", "createdAt"):
            print(f" - {key}: {data.get(key)}")
        return data
    print(f"❌ {response.status_code}: {response.text}")
    return None


def rename_user(user_id, name):
    print(f"\n--- Renaming user {user_id} to {name!r} ---")
    response = requests.put(f"{BASE_URL}/user/{user_id}", json={"name": name}, timeout=30)
    print(f"{response.status_code}: {response.text}")
    return response.status_code == 200


if __name__ == "__main__":
    if len(sys.argv) > 1:
        BASE_URL = sys.argv[1].rstrip("/")

    user_id = f"smoke-{uuid.uuid4().hex[:8]}"
    try:
        ok = submit_form(user_id)
        ok = fetch_user(user_id) is not None and ok
        ok = rename_user(user_id, "Smoke Test Renamed") and ok
        data = fetch_user(user_id)
        ok = ok and data is not None and data.get("name") == "Smoke Test Renamed"
    except requests.RequestException as e:
        print(f"❌ Connection Failed: {e}")
        sys.exit(1)

    print("\n✅ Flow verified" if ok else "\n❌ Flow verification failed")
    sys.exit(0 if ok else 1)
