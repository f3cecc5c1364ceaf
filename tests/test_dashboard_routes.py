from conftest import make_employee


def test_stats(client):
    client.post("/api/employees", json=make_employee(1))
    client.post("/api/employees", json=make_employee(2, employment={"department": "Finance", "status": "inactive"}))
    client.post(
        "/api/users",
        json={"firstName": "Root", "lastName": "Admin", "email": "root@example.com", "password": "secret1", "role": "admin"},
    )

    data = client.get("/api/dashboard/stats").json()["data"]
    assert data["overview"] == {
        "totalEmployees": 3,
        "totalAdmins": 1,
        "totalManagers": 0,
        "totalRegularEmployees": 2,
        "totalInactiveEmployees": 1,
        "recentEmployees": 3,
    }
    departments = {row["_id"]: row["count"] for row in data["employeesByDepartment"]}
    assert departments == {"Engineering": 1, "Finance": 1}

    activity = data["recentActivity"]
    assert len(activity) == 3
    admin = next(item for item in activity if item["role"] == "admin")
    assert admin["employeeId"] == "N/A"
    assert admin["department"] == "Unassigned"


def test_departments_and_performance(client):
    client.post("/api/employees", json=make_employee(1))
    client.post("/api/employees", json=make_employee(2))

    departments = client.get("/api/dashboard/departments").json()["data"]["departments"]
    assert departments == [{"department": "Engineering", "employeeCount": 2, "roles": ["employee"]}]

    performance = client.get("/api/dashboard/performance").json()["data"]
    assert performance["averageRating"] == 4.2
