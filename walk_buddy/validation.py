from __future__ import annotations

from typing import Optional

from .errors import ValidationError


def get_optional_string(value) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return value.strip() or None


def parse_positive_integer(value, field_name: str) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field_name} is required.")

    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a positive integer.")

    if isinstance(value, int):
        number = value
    elif isinstance(value, str):
        try:
            number = int(value.strip())
        except ValueError:
            raise ValidationError(f"{field_name} must be a positive integer.")
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    else:
        raise ValidationError(f"{field_name} must be a positive integer.")

    if number < 1:
        raise ValidationError(f"{field_name} must be a positive integer.")

    return number
