"""
Password validation utility shared by registration, onboarding and password change
"""
import re
from typing import Tuple

# Characters the identity provider accepts in a password
ALLOWED_PASSWORD_PATTERN = re.compile(r'^[A-Za-z\d@$!%*?&]+$')

PASSWORD_REQUIREMENTS_MESSAGE = (
    "Password must contain at least one letter, one number, and be at least 8 characters long"
)


def validate_password_strength(password: str) -> Tuple[bool, str]:
    """
    Validate a password against the registration rules.

    Args:
        password: The password to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not password or len(password) < 8:
        return False, PASSWORD_REQUIREMENTS_MESSAGE

    if not re.search(r'[A-Za-z]', password):
        return False, PASSWORD_REQUIREMENTS_MESSAGE

    if not re.search(r'\d', password):
        return False, PASSWORD_REQUIREMENTS_MESSAGE

    if not ALLOWED_PASSWORD_PATTERN.match(password):
        return False, "Password may only contain letters, numbers and the symbols @$!%*?&"

    return True, "Password is valid"


def check_password(password: str) -> str:
    """Pydantic-friendly wrapper: return the password or raise ValueError"""
    is_valid, message = validate_password_strength(password)
    if not is_valid:
        raise ValueError(message)
    return password
