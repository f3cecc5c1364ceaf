from scripts.create_admin_users import create_admin_users
from hrdesk.utils.hashing import verify_password


def test_seed_creates_accounts_once(mongo_db):
    assert create_admin_users(mongo_db) == ["admin@company.com", "hr@company.com"]
    assert create_admin_users(mongo_db) == []

    admin = mongo_db["users"].find_one({"email": "admin@company.com"})
    assert admin["role"] == "admin"
    assert admin["created_by"] == "seed"
    assert verify_password("password", admin["password"])
