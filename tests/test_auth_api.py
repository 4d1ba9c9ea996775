from backend.fastapi.models import User
from backend.security.password import verify_password

PASSWORD = "secret123"


def login(client, email, password=PASSWORD):
    return client.post("/api/v1/auth/login", json={"email": email, "password": password})


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_login_returns_token_and_branch(client, admin_user):
    response = login(client, "Manager@Example.com")

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["expires_in"] > 0
    assert body["user"]["branch"]["code"] == "A"

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "manager@example.com"


def test_login_with_wrong_password(client, admin_user):
    response = login(client, "manager@example.com", "not-it")

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


def test_deactivated_user_cannot_login_or_use_token(client, db, admin_user, headers):
    admin_user.is_active = False
    db.commit()

    assert login(client, "manager@example.com").status_code == 401
    assert client.get("/api/v1/auth/me", headers=headers).status_code == 401


def test_inactive_branch_blocks_login(client, db, branch_a, admin_user, headers):
    branch_a.is_active = False
    db.commit()

    response = login(client, "manager@example.com")

    assert response.status_code == 401
    assert response.json()["detail"] == "Branch is inactive"
    assert client.get("/api/v1/records/car-wash", headers=headers).status_code == 401


def test_missing_or_bad_token(client):
    assert client.get("/api/v1/auth/me").status_code in (401, 403)
    bad = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer nonsense"})
    assert bad.status_code == 401


def test_register_requires_super_admin(client, branch_a, headers, super_headers):
    payload = {
        "email": "Clerk@Example.com",
        "name": "Clerk",
        "password": "clerkpass",
        "branch_id": str(branch_a.id),
    }

    assert client.post("/api/v1/auth/register", json=payload, headers=headers).status_code == 403

    response = client.post("/api/v1/auth/register", json=payload, headers=super_headers)
    assert response.status_code == 201
    assert response.json()["email"] == "clerk@example.com"
    assert response.json()["role"] == "admin"

    again = client.post("/api/v1/auth/register", json=payload, headers=super_headers)
    assert again.status_code == 409


def test_register_into_inactive_branch(client, db, branch_b, super_headers):
    branch_b.is_active = False
    db.commit()

    response = client.post("/api/v1/auth/register", json={
        "email": "clerk@example.com",
        "name": "Clerk",
        "password": "clerkpass",
        "branch_id": str(branch_b.id),
    }, headers=super_headers)

    assert response.status_code == 400


def test_change_password(client, db, admin_user, headers):
    wrong = client.put("/api/v1/auth/change-password", headers=headers,
                       json={"current_password": "guess", "new_password": "newsecret"})
    assert wrong.status_code == 400

    response = client.put("/api/v1/auth/change-password", headers=headers,
                          json={"current_password": PASSWORD, "new_password": "newsecret"})
    assert response.status_code == 200

    user = db.query(User).populate_existing().filter(User.id == admin_user.id).one()
    assert verify_password("newsecret", user.password_hash)
    assert login(client, "manager@example.com", "newsecret").status_code == 200


def test_public_branch_list_hides_inactive(client, db, branch_a, branch_b):
    branch_b.is_active = False
    db.commit()

    response = client.get("/api/v1/auth/branches")

    assert response.status_code == 200
    assert [b["code"] for b in response.json()["branches"]] == ["A"]
