"""
Validation utilities for incoming credentials and ledger entries.
"""
import math
import re

from finance_tracker.errors import ValidationError

USERNAME_PATTERN = re.compile(r'^[A-Za-z0-9_]+$')
USERNAME_MAX_LENGTH = 64

PASSWORD_MIN_LENGTH = 8
PASSWORD_SPECIAL_CHARS = re.compile(r'[!@#$%^&*(),.?":{}|<>]')


def normalize_username(raw_username):
    """
    Normalize username strings while enforcing basic length + type checks.
    """
    if raw_username is None:
        return None
    username = str(raw_username).strip()
    if not username or len(username) > USERNAME_MAX_LENGTH:
        return None
    return username.lower()


def validate_username(username):
    """
    Return the lowercased username or raise ValidationError.
    """
    if not username:
        raise ValidationError("Username is required")
    if not isinstance(username, str) or not USERNAME_PATTERN.match(username):
        raise ValidationError("Username can only contain letters, numbers, and underscores")
    if len(username) > USERNAME_MAX_LENGTH:
        raise ValidationError(f"Username must be at most {USERNAME_MAX_LENGTH} characters long")
    return username.lower()


def validate_password(password):
    if not password:
        raise ValidationError("Password is required")
    if not isinstance(password, str):
        raise ValidationError("Password must be a string")
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")

    has_upper = any(c.isupper() for c in password)
    has_lower = any(c.islower() for c in password)
    has_digit = any(c.isdigit() for c in password)
    has_special = PASSWORD_SPECIAL_CHARS.search(password) is not None
    if not (has_upper and has_lower and has_digit and has_special):
        raise ValidationError(
            "Password must include uppercase, lowercase, number, and special character"
        )
    return password


def validate_entry_name(name, label):
    """
    Ensure an entry name is present. `label` is "Expense" or "Income".
    """
    if name is None or not str(name).strip():
        raise ValidationError(f"{label} name is required")
    return str(name).strip()


def parse_amount(raw_amount, label):
    """
    Parse a positive finite amount from a number or numeric string.
    """
    error = ValidationError(f"{label} amount must be a positive number")
    if raw_amount is None or isinstance(raw_amount, bool):
        raise error
    try:
        amount = float(raw_amount)
    except (TypeError, ValueError, OverflowError):
        raise error
    if not math.isfinite(amount) or amount <= 0:
        raise error
    return amount
