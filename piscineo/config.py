import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

logger = logging.getLogger(__name__)


def _int_env(name: str, default: int) -> int:
    """Read an integer setting, falling back to the default on bad values"""
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"⚠️ Invalid {name}={value!r}, using {default}")
        return default


# Branding used in the PDF footer and e-mail bodies
COMPANY_NAME = os.getenv("COMPANY_NAME", "Piscineo")

# Optional PNG logo drawn centered in every PDF footer
REPORT_LOGO_PATH = os.getenv("REPORT_LOGO_PATH")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Resend Email Configuration (fallback)
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM_ADDRESS = os.getenv("EMAIL_FROM_ADDRESS", "Piscineo <noreply@piscineo.com>")

# SMTP Configuration - used first when EMAIL_SERVER_HOST is set
EMAIL_SERVER_HOST = os.getenv("EMAIL_SERVER_HOST")
EMAIL_SERVER_PORT = _int_env("EMAIL_SERVER_PORT", 587)
EMAIL_SERVER_USER = os.getenv("EMAIL_SERVER_USER")
EMAIL_SERVER_PASSWORD = os.getenv("EMAIL_SERVER_PASSWORD")
# "true" forces implicit TLS (SMTP_SSL); port 465 always does
EMAIL_SERVER_SECURE = os.getenv("EMAIL_SERVER_SECURE", "false").lower() == "true"
EMAIL_SERVER_USE_TLS = os.getenv("EMAIL_SERVER_USE_TLS", "true").lower() == "true"
