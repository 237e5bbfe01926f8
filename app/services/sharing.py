import os
import secrets
import string

SHORT_ID_LENGTH = 8
SHORT_ID_ALPHABET = string.ascii_uppercase + string.digits

PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "")


def generate_short_id() -> str:
    return "".join(secrets.choice(SHORT_ID_ALPHABET) for _ in range(SHORT_ID_LENGTH))


def create_shareable_url(short_id: str) -> str:
    return f"{PUBLIC_BASE_URL.rstrip('/')}/trip/{short_id}"
