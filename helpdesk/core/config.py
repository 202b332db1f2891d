import json

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str

    REDIS_URL: str = "redis://redis:6379/0"

    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Guest access to a single ticket (check-ticket flow)
    TICKET_SESSION_EXPIRE_MINUTES: int = 60
    TICKET_SESSION_COOKIE: str = "ticket_session"

    EMAIL_BACKEND: str = "console"
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_FROM_EMAIL: str = "noreply@helpdesk.local"
    SMTP_FROM_NAME: str = "Helpdesk"

    # Public URL of the helpdesk, used for links in notification emails
    FRONTEND_URL: str = "http://localhost:5173"
    BACKEND_URL: str = "http://localhost:8000"

    BACKEND_CORS_ORIGINS: str = '["http://localhost:5173","http://localhost:3000"]'

    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Helpdesk API"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # When disabled, tickets are opened by anonymous guests who follow up
    # through a ticket session instead of a user account.
    USER_SYSTEM_ENABLED: bool = True
    # Non-staff uploads are silently dropped when attachments are disallowed.
    ALLOW_ATTACHMENTS: bool = True

    UPLOAD_DIR: str = "./uploads"
    MAX_FILE_SIZE_MB: int = 2

    # Cloudflare R2 storage (S3-compatible)
    R2_ACCOUNT_ID: str = ""
    R2_ACCESS_KEY_ID: str = ""
    R2_SECRET_ACCESS_KEY: str = ""
    R2_BUCKET_NAME: str = "helpdesk-uploads"
    R2_PUBLIC_URL: str = ""

    # Storage backend: "local" for development, "r2" for production
    STORAGE_BACKEND: str = "local"

    RATE_LIMIT_ENABLED: bool = True
    COMMENT_RATE_LIMIT: str = "30/minute"

    TICKET_WRITE_MAX_RETRIES: int = 3

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @property
    def cors_origins(self) -> list[str]:
        if isinstance(self.BACKEND_CORS_ORIGINS, str):
            try:
                parsed: list[str] = json.loads(self.BACKEND_CORS_ORIGINS)
                return parsed
            except json.JSONDecodeError:
                return ["http://localhost:5173", "http://localhost:3000"]
        return self.BACKEND_CORS_ORIGINS

    @property
    def r2_endpoint_url(self) -> str:
        return f"https://{self.R2_ACCOUNT_ID}.r2.cloudflarestorage.com"


settings = Settings()
