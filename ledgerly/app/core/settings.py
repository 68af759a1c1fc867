import os


def _normalize_db_url(url: str | None) -> str | None:
    if not url:
        return None
    u = url.strip()
    # Hosted Postgres providers hand out postgres:// URLs
    if u.startswith("postgres://"):
        u = u.replace("postgres://", "postgresql+psycopg2://", 1)
    return u


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    def __init__(self):
        self.app_name = "Ledgerly"
        self.api_version = "1.0.0"
        self.environment = os.environ.get("LEDGERLY_ENVIRONMENT", "development")
        self.secret_key = os.environ.get("LEDGERLY_SECRET_KEY", "CHANGE_ME")
        self.SECRET_KEY = self.secret_key
        self.access_token_expire_minutes = int(os.environ.get("LEDGERLY_ACCESS_TOKEN_EXPIRE_MINUTES", "30"))
        self.ACCESS_TOKEN_EXPIRE_MINUTES = self.access_token_expire_minutes
        self.database_url = _normalize_db_url(os.environ.get("LEDGERLY_DATABASE_URL")) or "sqlite:///./ledgerly.db"
        self.log_level = os.environ.get("LEDGERLY_LOG_LEVEL", "INFO")

        # Absolute links in emails and share URLs
        self.public_base_url = os.environ.get("LEDGERLY_PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/")

        self.currency_symbol = os.environ.get("LEDGERLY_CURRENCY_SYMBOL", "$")
        self.default_mileage_rate = os.environ.get("LEDGERLY_DEFAULT_MILEAGE_RATE", "0.67")

        self.smtp_host = os.environ.get("LEDGERLY_SMTP_HOST", "localhost")
        self.smtp_port = int(os.environ.get("LEDGERLY_SMTP_PORT", "25"))
        self.smtp_username = os.environ.get("LEDGERLY_SMTP_USERNAME")
        self.smtp_password = os.environ.get("LEDGERLY_SMTP_PASSWORD")
        self.smtp_use_tls = _env_bool("LEDGERLY_SMTP_USE_TLS", False)
        self.smtp_timeout_seconds = float(os.environ.get("LEDGERLY_SMTP_TIMEOUT_SECONDS", "10"))
        self.email_from = os.environ.get("LEDGERLY_EMAIL_FROM", "invoices@ledgerly.local")


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
