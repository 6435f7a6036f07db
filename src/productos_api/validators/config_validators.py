def to_uppercase(value: str | None) -> str | None:
    """
    Converts a string to uppercase if it's not None.
    """
    if value is None:
        return None
    return value.strip().upper()


def to_lowercase(value: str | None) -> str | None:
    """
    Converts a string to lowercase if it's not None.
    """
    if value is None:
        return None
    return value.strip().lower()


def require_min_length(value: str, min_length: int, field_name: str) -> str:
    """
    Reject configuration strings shorter than `min_length` characters.

    Used for signing secrets: a short HMAC key makes bearer tokens forgeable.
    """
    if len(value) < min_length:
        raise ValueError(f"{field_name} must be at least {min_length} characters long")
    return value
