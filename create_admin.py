"""
Create Admin User Script
Run this script to create the first admin account on the inventory backend
"""

import os
import sys
import httpx
from dotenv import load_dotenv

from app.core.backend import error_message_from
from app.core.resources import CREATE_PATHS
from app.core.validation import validate_user
from app.models.user import UserForm, UserRole

# Load environment variables
load_dotenv()

DEFAULT_BACKEND_URL = "http://localhost:5000"


def prompt_admin() -> UserForm:
    print("\nCreate Admin User")
    print("=" * 50)

    email = input("Enter admin email (default: admin@pstu.ac.bd): ") or "admin@pstu.ac.bd"
    password = input("Enter admin password (min 6 chars): ")
    confirm_password = input("Confirm admin password: ")
    name = input("Enter full name (default: Admin User): ") or "Admin User"
    phone = input("Enter phone (e.g. 01712345678): ")

    return UserForm(
        name=name,
        email=email,
        password=password,
        confirm_password=confirm_password,
        role=UserRole.ADMIN.value,
        phone=phone,
    )


def create_admin_user():
    """Create an admin user through the backend's user API"""
    backend_url = (os.getenv("BACKEND_URL") or DEFAULT_BACKEND_URL).rstrip("/")

    admin = prompt_admin()
    errors = validate_user(admin)
    if errors:
        for field, message in errors.items():
            print(f"Error ({field}): {message}")
        sys.exit(1)

    print("\nCreating admin user...")

    try:
        response = httpx.post(f"{backend_url}{CREATE_PATHS['users']}", json=admin.to_payload(), timeout=30.0)
    except httpx.HTTPError as e:
        print(f"\nError: cannot connect to {backend_url}: {e}")
        sys.exit(1)

    try:
        data = response.json()
    except ValueError:
        data = None

    if not response.is_success:
        message = error_message_from(data, response.status_code, response.reason_phrase)
        print(f"\nError creating admin user: {message}")
        sys.exit(1)

    print("\n" + "=" * 50)
    print("Admin user created successfully!")
    print("=" * 50)
    print(f"\nLogin email: {admin.email}")
    print(f"You can now login at: {os.getenv('FRONTEND_URL', 'http://localhost:3000')}/login")
    print()


if __name__ == "__main__":
    create_admin_user()
