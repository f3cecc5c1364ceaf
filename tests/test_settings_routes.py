def test_settings_require_token(client):
    response = client.get("/api/settings")
    assert response.status_code == 401
    assert response.json()["success"] is False


def test_settings_require_admin(client, hr_headers):
    response = client.get("/api/settings", headers=hr_headers)
    assert response.status_code == 403
    assert response.json()["message"] == "Access denied. Admin privileges required."


def test_get_settings_creates_defaults(client, admin_headers):
    data = client.get("/api/settings", headers=admin_headers).json()["data"]
    assert data["company"]["name"] == "Worley Ventures"
    assert data["userManagement"]["passwordMinLength"] == 8
    assert data["system"]["logLevel"] == "info"

    again = client.get("/api/settings", headers=admin_headers).json()["data"]
    assert again["_id"] == data["_id"]


def test_update_company_merges(client, admin_headers):
    response = client.put(
        "/api/settings/company",
        headers=admin_headers,
        json={"company": {"name": "Acme", "domain": "acme.test"}},
    )
    assert response.status_code == 200
    company = response.json()["data"]
    assert company["name"] == "Acme"
    assert company["currency"] == "USD"


def test_company_requires_name_and_domain(client, admin_headers):
    response = client.put("/api/settings/company", headers=admin_headers, json={"company": {"name": "Acme"}})
    assert response.status_code == 400
    assert response.json()["message"] == "Company name and domain are required"


def test_section_bounds_are_validated(client, admin_headers):
    response = client.put(
        "/api/settings/user-management",
        headers=admin_headers,
        json={"userManagement": {"passwordMinLength": 4}},
    )
    assert response.status_code == 400
    assert response.json()["errors"][0].startswith("passwordMinLength")

    response = client.put(
        "/api/settings/system", headers=admin_headers, json={"system": {"backupFrequency": "yearly"}}
    )
    assert response.status_code == 400


def test_unknown_section(client, admin_headers):
    response = client.put("/api/settings/payroll", headers=admin_headers, json={})
    assert response.status_code == 404


def test_export_report_and_reset(client, admin_headers):
    client.put(
        "/api/settings/notifications",
        headers=admin_headers,
        json={"notifications": {"smsNotifications": True}},
    )

    exported = client.post("/api/settings/export", headers=admin_headers, json={"dataType": "all"}).json()
    assert exported["data"]["settings"]["notifications"]["smsNotifications"] is True
    assert exported["data"]["employees"] == []
    assert "timestamp" in exported

    report = client.get("/api/settings/report", headers=admin_headers).json()["data"]
    assert report["systemInfo"]["totalUsers"] == 0

    refused = client.post("/api/settings/reset", headers=admin_headers, json={})
    assert refused.status_code == 400

    reset = client.post("/api/settings/reset", headers=admin_headers, json={"confirmReset": True})
    assert reset.status_code == 200
    assert reset.json()["data"]["notifications"]["smsNotifications"] is False
