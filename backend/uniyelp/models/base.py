import re
import secrets
import string

ID_ALPHABET = string.ascii_letters + string.digits + "_-"


def generate_id(size: int = 21) -> str:
    """Random URL-safe surrogate key."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(size))


def slugify(name: str) -> str:
    """Lowercase, runs of non-alphanumerics collapsed to one dash."""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
