# movment/core/config.py
import os
from typing import ClassVar, List

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _default_database_url() -> str:
    data_dir = os.path.abspath(os.getenv("DATA_DIR", "./data"))
    os.makedirs(data_dir, exist_ok=True)
    return os.getenv("DATABASE_URL", f"sqlite:///{os.path.join(data_dir, 'movment.db')}")


class Settings(BaseModel):
    DATA_DIR: ClassVar[str] = os.path.abspath(os.getenv("DATA_DIR", "./data"))

    PROJECT_NAME: str = Field(default_factory=lambda: os.getenv("PROJECT_NAME", "Mov-Ment API"))
    DATABASE_URL: str = Field(default_factory=_default_database_url)
    RUN_MIGRATIONS: bool = Field(default_factory=lambda: _env_bool("RUN_MIGRATIONS", "true"))
    LOG_LEVEL: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    )

    # ---------------------------
    # Auth
    # ---------------------------
    SECRET_KEY: str = Field(default_factory=lambda: os.getenv("SECRET_KEY", "CHANGE_ME_SUPER_SECRET"))
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default_factory=lambda: int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(7 * 24 * 60)))
    )
    OWNER_EMAIL: str = Field(default_factory=lambda: os.getenv("OWNER_EMAIL", "owner@movment.local"))
    OWNER_PASSWORD: str = Field(default_factory=lambda: os.getenv("OWNER_PASSWORD", "change-me-owner"))

    # ---------------------------
    # Background jobs
    # ---------------------------
    SCHEDULERS_ENABLED: bool = Field(default_factory=lambda: _env_bool("SCHEDULERS_ENABLED", "true"))
    AUTO_ASSIGN_INTERVAL_SECONDS: int = Field(default_factory=lambda: int(os.getenv("AUTO_ASSIGN_INTERVAL_SECONDS", "60")))
    AUTO_ASSIGN_DELAY_MINUTES: int = Field(default_factory=lambda: int(os.getenv("AUTO_ASSIGN_DELAY_MINUTES", "15")))
    REMINDER_INTERVAL_SECONDS: int = Field(default_factory=lambda: int(os.getenv("REMINDER_INTERVAL_SECONDS", str(6 * 60 * 60))))
    REMINDER_WINDOW_HOURS: int = Field(default_factory=lambda: int(os.getenv("REMINDER_WINDOW_HOURS", "24")))

    # ---------------------------
    # Delivery (stubbed unless enabled)
    # ---------------------------
    EMAIL_ENABLED: bool = Field(default_factory=lambda: _env_bool("EMAIL_ENABLED"))
    SMTP_HOST: str = Field(default_factory=lambda: os.getenv("SMTP_HOST", "localhost"))
    SMTP_PORT: int = Field(default_factory=lambda: int(os.getenv("SMTP_PORT", "587")))
    SMTP_USER: str = Field(default_factory=lambda: os.getenv("SMTP_USER", ""))
    SMTP_PASSWORD: str = Field(default_factory=lambda: os.getenv("SMTP_PASSWORD", ""))
    SMTP_FROM: str = Field(default_factory=lambda: os.getenv("SMTP_FROM", os.getenv("SMTP_USER", "no-reply@movment.local")))
    SMTP_STARTTLS: bool = Field(default_factory=lambda: _env_bool("SMTP_STARTTLS", "true"))
    SMS_ENABLED: bool = Field(default_factory=lambda: _env_bool("SMS_ENABLED"))
    TWILIO_ACCOUNT_SID: str = Field(default_factory=lambda: os.getenv("TWILIO_ACCOUNT_SID", ""))
    TWILIO_AUTH_TOKEN: str = Field(default_factory=lambda: os.getenv("TWILIO_AUTH_TOKEN", ""))
    TWILIO_FROM: str = Field(default_factory=lambda: os.getenv("TWILIO_FROM", ""))
    DELIVERY_TIMEOUT_SECONDS: int = Field(default_factory=lambda: int(os.getenv("DELIVERY_TIMEOUT_SECONDS", "10")))

    # ---------------------------
    # Invoice
    # ---------------------------
    INVOICE_COMPANY_NAME: str = Field(default_factory=lambda: os.getenv("INVOICE_COMPANY_NAME", "Mov-Ment"))
    INVOICE_COMPANY_ADDRESS: str = Field(default_factory=lambda: os.getenv("INVOICE_COMPANY_ADDRESS", "Event Management Office"))
    INVOICE_COMPANY_PHONE: str = Field(default_factory=lambda: os.getenv("INVOICE_COMPANY_PHONE", ""))
    INVOICE_COMPANY_EMAIL: str = Field(default_factory=lambda: os.getenv("INVOICE_COMPANY_EMAIL", "contact@mov-ment.com"))
    INVOICE_GST_TAX_ID: str = Field(default_factory=lambda: os.getenv("INVOICE_GST_TAX_ID", ""))
    INVOICE_BANK_NAME: str = Field(default_factory=lambda: os.getenv("INVOICE_BANK_NAME", ""))
    INVOICE_ACCOUNT_NAME: str = Field(default_factory=lambda: os.getenv("INVOICE_ACCOUNT_NAME", ""))
    INVOICE_ACCOUNT_NUMBER: str = Field(default_factory=lambda: os.getenv("INVOICE_ACCOUNT_NUMBER", ""))
    INVOICE_IFSC_SWIFT: str = Field(default_factory=lambda: os.getenv("INVOICE_IFSC_SWIFT", ""))
    INVOICE_PAYMENT_DAYS: int = Field(default_factory=lambda: int(os.getenv("INVOICE_PAYMENT_DAYS", "7")))
    INVOICE_VERIFY_URL_BASE: str = Field(
        default_factory=lambda: os.getenv("INVOICE_VERIFY_URL_BASE", "http://localhost:5173/invoice")
    )


settings = Settings()
