import uuid


def is_uuid(value: str) -> bool:
    """True when ``value`` parses as a UUID; row ids outside that shape cannot exist."""
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True
