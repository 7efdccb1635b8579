"""
Form validators. Each returns {field: message}; an empty dict means the form is valid.
"""
import re

_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.search(email))


def validate_login_form(email: str, password: str) -> dict[str, str]:
    errors: dict[str, str] = {}

    if not email:
        errors["email"] = "Email is required"
    elif not is_valid_email(email):
        errors["email"] = "Email is invalid"

    if not password:
        errors["password"] = "Password is required"

    return errors


def validate_registration_form(
    email: str,
    name: str,
    password: str,
    confirm_password: str,
    super_key: str,
) -> dict[str, str]:
    errors = validate_login_form(email, password)

    if not name:
        errors["name"] = "Name is required"
    elif len(name) < 2:
        errors["name"] = "Name must be at least 2 characters"

    if password and len(password) < 8:
        errors["password"] = "Password must be at least 8 characters"

    if not confirm_password:
        errors["confirm_password"] = "Please confirm your password"
    elif password != confirm_password:
        errors["confirm_password"] = "Passwords do not match"

    if not super_key:
        errors["super_key"] = "Super key is required"

    return errors


def validate_case_form(title: str) -> dict[str, str]:
    if not (title or "").strip():
        return {"title": "Please enter a case title"}
    return {}
