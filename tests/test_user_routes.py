from conftest import make_employee

NEW_USER = {
    "firstName": "Meera",
    "lastName": "Nair",
    "email": "meera@example.com",
    "password": "secret123",
    "role": "hr",
}


def test_create_user(client):
    response = client.post("/api/users", json=NEW_USER)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["email"] == "meera@example.com"
    assert data["role"] == "hr"
    assert "password" not in data


def test_create_user_requires_all_fields(client):
    response = client.post("/api/users", json=dict(NEW_USER, lastName=""))
    assert response.status_code == 400
    assert response.json()["message"] == "All fields are required"


def test_create_user_duplicate_email(client):
    client.post("/api/users", json=NEW_USER)
    response = client.post("/api/users", json=dict(NEW_USER, email="MEERA@example.com"))
    assert response.status_code == 400
    assert response.json()["message"] == "User already exists with this email"


def test_list_users_hides_employees_by_default(client):
    client.post("/api/users", json=NEW_USER)
    client.post("/api/employees", json=make_employee(1))

    users = client.get("/api/users").json()["data"]
    assert [user["email"] for user in users["users"]] == ["meera@example.com"]
    assert users["pagination"]["totalUsers"] == 1

    employees = client.get("/api/users", params={"role": "employee"}).json()["data"]["users"]
    assert [user["email"] for user in employees] == ["employee1@example.com"]


def test_update_user(client):
    created = client.post("/api/users", json=NEW_USER).json()["data"]
    client.post("/api/users", json=dict(NEW_USER, email="other@example.com"))

    response = client.put(f"/api/users/{created['_id']}", json={"lastName": "Menon", "role": "admin"})
    assert response.status_code == 200
    assert response.json()["data"]["lastName"] == "Menon"
    assert response.json()["data"]["role"] == "admin"

    clash = client.put(f"/api/users/{created['_id']}", json={"email": "other@example.com"})
    assert clash.status_code == 400
    assert clash.json()["message"] == "Email already exists"


def test_delete_user(client):
    created = client.post("/api/users", json=NEW_USER).json()["data"]
    assert client.delete(f"/api/users/{created['_id']}").status_code == 200
    missing = client.delete(f"/api/users/{created['_id']}")
    assert missing.status_code == 404
    assert missing.json()["message"] == "User not found"


def test_login_returns_token(client):
    client.post("/api/users", json=NEW_USER)

    response = client.post("/api/auth/login", json={"email": "meera@example.com", "password": "secret123"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["token"]
    assert data["user"]["role"] == "hr"

    wrong = client.post("/api/auth/login", json={"email": "meera@example.com", "password": "nope"})
    assert wrong.status_code == 401
    assert client.post("/api/auth/login", json={}).status_code == 400


def test_employee_can_log_in_with_employee_id(client):
    client.post("/api/employees", json=make_employee(3))
    response = client.post("/api/auth/login", json={"email": "employee3@example.com", "password": "EMP003"})
    assert response.status_code == 200
    assert response.json()["data"]["user"]["employeeId"] == "EMP003"
