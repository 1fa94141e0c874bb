import re
import secrets

TRACKING_ID_PREFIX = "APP-"
TRACKING_ID_PATTERN = re.compile(r"^APP-[0-9A-F]{8}$", re.IGNORECASE)


# Builds a public tracking ID from 4 random bytes; uniqueness is left to the unique index
def generate_tracking_id() -> str:
    return TRACKING_ID_PREFIX + secrets.token_bytes(4).hex().upper()


def is_valid_tracking_id(value: str) -> bool:
    return bool(value) and bool(TRACKING_ID_PATTERN.match(value))
