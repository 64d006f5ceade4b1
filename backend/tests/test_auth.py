from heartsmiles.core.constants import StaffRole


def test_login_returns_token_without_password(client, make_staff):
    make_staff(email="staff@heartsmiles.org", password="s3cret!")

    resp = client.post("/api/auth/login", json={"email": "staff@heartsmiles.org", "password": "s3cret!"})

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["message"] == "Login successful"
    assert body["token"]
    assert body["staff"]["email"] == "staff@heartsmiles.org"
    assert "password" not in body["staff"]


def test_login_token_authenticates(client, make_staff):
    make_staff(email="staff@heartsmiles.org", password="s3cret!")
    token = client.post(
        "/api/auth/login", json={"email": "staff@heartsmiles.org", "password": "s3cret!"},
    ).json()["token"]

    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 200
    assert resp.json()["staff"]["email"] == "staff@heartsmiles.org"
    assert "password" not in resp.json()["staff"]


def test_login_wrong_password(client, make_staff):
    make_staff(email="staff@heartsmiles.org", password="s3cret!")
    resp = client.post("/api/auth/login", json={"email": "staff@heartsmiles.org", "password": "nope"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid credentials"


def test_login_unknown_email(client):
    resp = client.post("/api/auth/login", json={"email": "ghost@example.org", "password": "x"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid credentials"


def test_login_deactivated(client, make_staff):
    make_staff(email="gone@heartsmiles.org", password="s3cret!", is_active=False)
    resp = client.post("/api/auth/login", json={"email": "gone@heartsmiles.org", "password": "s3cret!"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Account is deactivated"


def test_invalid_token(client):
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid token"


def test_expired_token(client, make_staff, token_for):
    headers = token_for(make_staff(), expires_minutes=-1)
    resp = client.get("/api/auth/me", headers=headers)
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Token expired"


def test_inactive_staff_token_rejected(client, make_staff, token_for):
    headers = token_for(make_staff(is_active=False))
    resp = client.get("/api/auth/me", headers=headers)
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid or inactive user"


def test_unknown_role_denied_read_access(client, make_staff, token_for):
    headers = token_for(make_staff(role="volunteer"))
    resp = client.get("/api/participants", headers=headers)
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Staff access required"


def test_umd_staff_can_read(client, make_staff, token_for):
    headers = token_for(make_staff(role=StaffRole.UMD.value))
    resp = client.get("/api/programs", headers=headers)
    assert resp.status_code == 200
