"""Shared validation utilities"""

import re
from typing import Optional

import bleach


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize a phone number.

    Keeps a leading "+" and the digits, dropping spaces, dashes and brackets.

    Raises:
        ValueError: If the number does not have 10-15 digits
    """
    if not phone:
        return phone

    phone = phone.strip()
    digits = re.sub(r"\D", "", phone)

    if len(digits) < 10 or len(digits) > 15:
        raise ValueError("Phone number must have 10 to 15 digits")

    return f"+{digits}" if phone.startswith("+") else digits


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def clean_text(value: Optional[str], max_length: int = 1000) -> Optional[str]:
    """
    Strip HTML markup from free text (remarks, problem descriptions, notes).

    Raises:
        ValueError: If the cleaned text exceeds max_length
    """
    if value is None:
        return value

    cleaned = bleach.clean(value, tags=[], attributes={}, strip=True).strip()
    if len(cleaned) > max_length:
        raise ValueError(f"Input exceeds maximum length of {max_length} characters")
    return cleaned
