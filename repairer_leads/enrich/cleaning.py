"""Normalisation of contact fields extracted by the classifier."""

import re
from typing import Optional
from urllib.parse import urlparse

FRENCH_PHONE_RE = re.compile(r"^(\+33|0)[1-9]\d{8}$")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def clean_text(text: Optional[str], max_length: int = 200) -> str:
    """Collapse whitespace and truncate."""
    if not text:
        return ""
    return " ".join(text.split())[:max_length]


def clean_phone(phone: Optional[str]) -> Optional[str]:
    """Keep a phone number only when it is a valid French number."""
    if not phone:
        return None
    cleaned = re.sub(r"[^\d+]", "", phone)
    return cleaned if FRENCH_PHONE_RE.match(cleaned) else None


def clean_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return None
    email = email.strip().lower()
    return email if EMAIL_RE.match(email) else None


def clean_website(website: Optional[str]) -> Optional[str]:
    """Return an absolute URL, adding a scheme to bare domains."""
    if not website:
        return None
    website = website.strip()

    parsed = urlparse(website)
    if parsed.scheme in ("http", "https") and parsed.netloc:
        return website

    # Bare domain such as "example.fr/contact"
    if "." in website and " " not in website and "://" not in website:
        return f"https://{website}"
    return None
