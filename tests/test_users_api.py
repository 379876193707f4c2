# tests/test_users_api.py

from app.models import User, UserRole

USERS_URL = "/api/users"


def test_list_users_is_admin_only(client, auth_headers, admin, alice, bob):
    response = client.get(USERS_URL, headers=auth_headers(admin))
    assert response.status_code == 200
    assert {u["email"] for u in response.json()} == {admin.email, alice.email, bob.email}

    assert client.get(USERS_URL, headers=auth_headers(alice)).status_code == 403


def test_assignable_users(client, auth_headers, admin, alice, bob):
    as_admin = client.get(f"{USERS_URL}/assignable", headers=auth_headers(admin)).json()
    as_alice = client.get(f"{USERS_URL}/assignable", headers=auth_headers(alice)).json()

    assert len(as_admin) == 3
    assert [u["id"] for u in as_alice] == [alice.id]


def test_get_user(client, auth_headers, admin, alice, bob):
    assert client.get(f"{USERS_URL}/{alice.id}", headers=auth_headers(alice)).status_code == 200
    assert client.get(f"{USERS_URL}/{alice.id}", headers=auth_headers(admin)).status_code == 200
    assert client.get(f"{USERS_URL}/{alice.id}", headers=auth_headers(bob)).status_code == 403
    assert client.get(f"{USERS_URL}/999", headers=auth_headers(admin)).status_code == 404
    response = client.get(f"{USERS_URL}/bad", headers=auth_headers(admin))
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid user ID format"


def test_admin_creates_admin(client, auth_headers, db, admin):
    response = client.post(
        USERS_URL,
        json={"name": "Second Admin", "email": "root2@example.com", "password": "secret123", "role": "admin"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 201
    assert response.json()["role"] == "admin"
    assert db.query(User).filter(User.email == "root2@example.com").one().role == UserRole.ADMIN


def test_non_admin_cannot_create_users(client, auth_headers, alice):
    response = client.post(
        USERS_URL,
        json={"name": "Mallory", "email": "mallory@example.com", "password": "secret123", "role": "admin"},
        headers=auth_headers(alice),
    )
    assert response.status_code == 403


def test_create_user_rejects_unknown_role(client, auth_headers, admin):
    response = client.post(
        USERS_URL,
        json={"name": "Eve", "email": "eve@example.com", "password": "secret123", "role": "superuser"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 400


def test_update_user_never_changes_role(client, auth_headers, db, admin, alice):
    response = client.put(
        f"{USERS_URL}/{alice.id}",
        json={"name": "Alice Cooper", "role": "admin"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Alice Cooper"
    assert response.json()["role"] == "user"


def test_update_user_email_conflict(client, auth_headers, admin, alice, bob):
    response = client.put(f"{USERS_URL}/{alice.id}", json={"email": bob.email}, headers=auth_headers(admin))
    assert response.status_code == 400


def test_update_password_allows_new_login(client, auth_headers, admin, alice):
    client.put(f"{USERS_URL}/{alice.id}", json={"password": "brand-new"}, headers=auth_headers(admin))

    response = client.post("/api/auth/login", json={"email": alice.email, "password": "brand-new"})
    assert response.status_code == 200


def test_delete_user(client, auth_headers, db, admin, bob):
    bob_id = bob.id
    response = client.delete(f"{USERS_URL}/{bob_id}", headers=auth_headers(admin))

    assert response.status_code == 200
    db.expire_all()
    assert db.query(User).filter(User.id == bob_id).first() is None


def test_delete_user_with_tasks_is_refused(client, auth_headers, admin, alice, make_task):
    make_task(alice, creator=admin)
    response = client.delete(f"{USERS_URL}/{alice.id}", headers=auth_headers(admin))
    assert response.status_code == 400


def test_admin_cannot_delete_self(client, auth_headers, admin):
    assert client.delete(f"{USERS_URL}/{admin.id}", headers=auth_headers(admin)).status_code == 400


def test_non_admin_cannot_delete(client, auth_headers, alice, bob):
    assert client.delete(f"{USERS_URL}/{bob.id}", headers=auth_headers(alice)).status_code == 403
