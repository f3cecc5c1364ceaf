#!/usr/bin/env python3
"""
Script to create the initial admin and HR accounts in the 'users' collection
"""

import os
import sys

# Load environment variables
from dotenv import load_dotenv
load_dotenv()

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from hrdesk.services.user_service import UserService, UserServiceError  # noqa: E402

DEFAULT_ACCOUNTS = [
    {
        "firstName": "System",
        "lastName": "Administrator",
        "email": os.getenv("SEED_ADMIN_EMAIL", "admin@company.com"),
        "password": os.getenv("SEED_ADMIN_PASSWORD", "password"),
        "role": "admin",
    },
    {
        "firstName": "HR",
        "lastName": "Manager",
        "email": os.getenv("SEED_HR_EMAIL", "hr@company.com"),
        "password": os.getenv("SEED_HR_PASSWORD", "password"),
        "role": "hr",
    },
]


def create_admin_users(database=None, accounts=None):
    """Create each account unless its email is already taken. Returns the created emails."""
    service = UserService(database=database)
    created = []
    for account in accounts or DEFAULT_ACCOUNTS:
        try:
            service.create_user(account, actor="seed")
        except UserServiceError as exc:
            print(f"Skipping {account['email']}: {exc.message}")
            continue
        print(f"Created {account['role']} user {account['email']}")
        created.append(account["email"])
    return created


if __name__ == "__main__":
    create_admin_users()
