"""Global configuration values."""

import os
from pathlib import Path

# LLM provider used for email drafting and the planning chat ("gemini" or "openai")
LLM_PROVIDER = os.environ.get("LLM_PROVIDER", "gemini").lower()

# Default Gemini model (can be overridden via env)
DEFAULT_MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.0-flash")

# Default OpenAI model when LLM_PROVIDER=openai
OPENAI_MODEL = os.environ.get("OPENAI_MODEL", "gpt-4o")

# Local data directory: vendor seed file and the wedding/outreach store
DATA_DIR = Path(os.environ.get("DATA_DIR", "./data"))
VENDOR_DATA_FILE = Path(os.environ.get("VENDOR_DATA_FILE", str(DATA_DIR / "vendors.json")))
WEDDING_STORE_FILE = Path(os.environ.get("WEDDING_STORE_FILE", str(DATA_DIR / "weddings.json")))

# Optional Supabase vendor store (used instead of VENDOR_DATA_FILE when both are set)
SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_KEY = os.environ.get("SUPABASE_KEY", "")

# Transactional email (Resend)
RESEND_API_KEY = os.environ.get("RESEND_API_KEY", "")
RESEND_API_URL = os.environ.get("RESEND_API_URL", "https://api.resend.com")
EMAIL_FROM = os.environ.get("EMAIL_FROM", "")

# Web app
APP_PASSWORD = os.environ.get("APP_PASSWORD", "")
SECRET_KEY = os.environ.get("SECRET_KEY", "wedding-outreach-dev-key")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


def validate_env() -> list[str]:
    """Return a list of configuration problems (empty when the config is usable)."""
    errors: list[str] = []

    if LLM_PROVIDER not in ("gemini", "openai"):
        errors.append(f"LLM_PROVIDER must be 'gemini' or 'openai', got '{LLM_PROVIDER}'")
    elif LLM_PROVIDER == "gemini":
        if not (os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY")):
            errors.append("Missing GEMINI_API_KEY or GOOGLE_API_KEY")
    elif not os.environ.get("OPENAI_API_KEY"):
        errors.append("Missing OPENAI_API_KEY")

    if not APP_PASSWORD:
        errors.append("Missing APP_PASSWORD")

    if SUPABASE_URL and not SUPABASE_URL.startswith("https://"):
        errors.append("SUPABASE_URL must start with https://")
    if bool(SUPABASE_URL) != bool(SUPABASE_KEY):
        errors.append("SUPABASE_URL and SUPABASE_KEY must be set together")

    if RESEND_API_KEY and not EMAIL_FROM:
        errors.append("EMAIL_FROM is required when RESEND_API_KEY is set")
    if EMAIL_FROM and "@" not in EMAIL_FROM:
        errors.append("EMAIL_FROM must be a valid email address")

    return errors
