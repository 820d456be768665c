from jose import jwt

from config import settings
from conftest import login
from models.log import Log


def test_root(client):
    resp = client.get("/")
    assert resp.status_code == 200


def test_register(client, attrs):
    resp = client.post("/register", json=attrs.as_dict())
    assert resp.status_code == 201, resp.text

    body = resp.json()
    assert body["email"] == "user@example.com"
    assert body["admin"] is False
    assert body["primary"] is False
    assert "password" not in body
    assert "password_hash" not in body


def test_register_reports_all_errors(client, attrs):
    resp = client.post(
        "/register",
        json=attrs.with_(first_name="", email="user_at_foo.org", password_confirmation="nope"),
    )
    assert resp.status_code == 422

    errors = resp.json()["detail"]["errors"]
    assert errors == {
        "first_name": ["can't be blank"],
        "email": ["is invalid"],
        "password_confirmation": ["doesn't match password"],
    }


def test_register_duplicate_email_any_case(client, attrs):
    assert client.post("/register", json=attrs.as_dict()).status_code == 201

    resp = client.post("/register", json=attrs.with_(email="USER@EXAMPLE.COM"))
    assert resp.status_code == 422
    assert resp.json()["detail"]["errors"] == {"email": ["has already been taken"]}


def test_login_and_me(client, user, attrs):
    headers = login(client, attrs.email, attrs.password)

    resp = client.get("/me", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["id"] == user.id


def test_login_failures_are_indistinguishable(client, user, attrs):
    wrong_password = client.post("/login", json={"email": attrs.email, "password": "wrongpass"})
    unknown_email = client.post("/login", json={"email": "bar@foo.com", "password": attrs.password})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"detail": "Invalid credentials"}


def test_me_requires_token(client):
    assert client.get("/me").status_code in (401, 403)
    assert client.get("/me", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_update_profile(client, user, attrs):
    headers = login(client, attrs.email, attrs.password)

    resp = client.put("/me", json={"first_name": "Jay"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["first_name"] == "Jay"

    resp = client.put("/me", json={"password": "abcdefg"}, headers=headers)
    assert resp.status_code == 422
    assert resp.json()["detail"]["errors"] == {"password_confirmation": ["doesn't match password"]}


def test_change_password_then_login(client, user, attrs):
    headers = login(client, attrs.email, attrs.password)
    resp = client.put(
        "/me",
        json={"password": "newsecret", "password_confirmation": "newsecret"},
        headers=headers,
    )
    assert resp.status_code == 200

    assert client.post("/login", json={"email": attrs.email, "password": attrs.password}).status_code == 401
    login(client, attrs.email, "newsecret")


def test_my_shifts(client, db, user, attrs, shift_type, shift_start):
    from services import shifts as shift_service

    mine = shift_service.create_shift(db, shift_type, shift_start, primary=user)
    shift_service.create_shift(db, shift_type, shift_start)

    headers = login(client, attrs.email, attrs.password)
    resp = client.get("/me/shifts", headers=headers)
    assert resp.status_code == 200
    assert [s["id"] for s in resp.json()] == [mine.id]


def test_auth_events_are_audited(client, db, user, attrs):
    login(client, attrs.email, attrs.password)
    client.post("/login", json={"email": attrs.email, "password": "wrongpass"})

    statuses = [
        row.status
        for row in db.query(Log).filter(Log.action == "LOGIN").order_by(Log.id).all()
    ]
    assert statuses == ["SUCCESS", "FAIL"]


def test_token_carries_only_subject_and_expiry(client, user, attrs):
    token = login(client, attrs.email, attrs.password)["Authorization"].split(" ", 1)[1]
    claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert set(claims) == {"sub", "exp"}
    assert claims["sub"] == attrs.email
