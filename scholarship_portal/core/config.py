import os
from typing import List
from dotenv import load_dotenv

load_dotenv()


def _split_csv(raw: str) -> List[str]:
    return [item.strip() for item in (raw or "").split(",") if item.strip()]


class Settings:
    PROJECT_NAME: str = "Scholarship Application Portal"
    PORTAL_NAME: str = os.getenv("PORTAL_NAME", "AUYPCT")
    MONGODB_URI: str = os.getenv("MONGODB_URI")
    MONGODB_DB_NAME: str = os.getenv("MONGODB_DB_NAME")
    CLIENT_URL: str = os.getenv("CLIENT_URL", "http://localhost:5173")
    APP_URL: str = os.getenv("APP_URL", "http://localhost:8000")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    TIMEZONE: str = os.getenv("TIMEZONE", "Asia/Kolkata")

    # Outbound email (Brevo transactional API)
    BREVO_API_KEY: str = os.getenv("BREVO_API_KEY")
    BREVO_API_URL: str = os.getenv("BREVO_API_URL", "https://api.brevo.com/v3/smtp/email")
    EMAIL_FROM: str = os.getenv("EMAIL_FROM", "noreply@example.org")
    ADMIN_EMAILS: str = os.getenv("ADMIN_EMAILS", "")
    TRUSTEE_EMAILS: str = os.getenv("TRUSTEE_EMAILS", "")
    EMAIL_TIMEOUT_SECONDS: float = float(os.getenv("EMAIL_TIMEOUT_SECONDS", "30"))

    # Upload storage
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "local")
    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "uploads")
    SUPABASE_URL: str = os.getenv("SUPABASE_URL")
    SUPABASE_SERVICE_ROLE: str = os.getenv("SUPABASE_SERVICE_ROLE")
    SUPABASE_ANON_PUBLIC: str = os.getenv("SUPABASE_ANON_PUBLIC")
    SUPABASE_BUCKET: str = os.getenv("SUPABASE_BUCKET", "application-uploads")

    def __init__(self, **overrides):
        for key, value in overrides.items():
            if not hasattr(type(self), key):
                raise AttributeError(f"Unknown setting: {key}")
            setattr(self, key, value)

    @property
    def allowed_origins(self) -> List[str]:
        return _split_csv(self.CLIENT_URL)

    @property
    def operations_recipients(self) -> List[str]:
        """Admin and trustee addresses, de-duplicated, in configured order."""
        recipients = []
        for address in _split_csv(self.ADMIN_EMAILS) + _split_csv(self.TRUSTEE_EMAILS):
            if address not in recipients:
                recipients.append(address)
        return recipients


settings = Settings()


def mask_secret(val: str) -> str:
    if not val:
        return "<missing>"
    if len(val) <= 8:
        return "*" * len(val)
    return f"{val[:4]}...{val[-4:]}"
