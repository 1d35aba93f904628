"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./proposals.db"

    # Service
    service_name: str = "proposal-gateway"
    log_level: str = "INFO"

    # Auth
    session_ttl_hours: int = 24
    bcrypt_rounds: int = 12

    # Proposal defaults
    proposal_validity_days: int = 30
    document_title: str = "Payment Processing Proposal"
    default_company_name: str = "Transfer Global Inc."
    default_company_address: str = "2135 De la Montagnes\nMontreal, QC, H3G 1Z8"
    default_company_phone: str = ""
    default_company_email: str = "finance@linx.fi"
    default_company_logo: str = "/linx-logo.png"

    # HTTP Client
    inline_remote_logo: bool = True
    http_timeout_seconds: float = 5.0


settings = Settings()
