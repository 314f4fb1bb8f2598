import os

from dotenv import load_dotenv
from pydantic_settings import BaseSettings


load_dotenv()


def _read_secret(env_var: str, default: str = "") -> str:
    """Read secret from environment variable or file path (for Cloud Run secrets)"""
    value = os.getenv(env_var, default)

    # If value looks like a file path and exists, read the file
    # This handles Cloud Run's --set-secrets behavior
    if value and os.path.exists(value):
        try:
            with open(value) as f:
                return f.read().strip()
        except OSError:
            return default

    return value


class Settings(BaseSettings):
    APP_TITLE: str = "coursetrack-api"
    APP_DESCRIPTION: str = "Enrollment lifecycle API: payment, progress, completion and certificates"
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # CORS - loaded from Secret Manager in production
    ALLOW_ORIGINS: str = _read_secret(
        "ALLOW_ORIGINS", "http://localhost:3000,http://localhost:8000"
    )

    # Firestore - credentials file path or inline JSON
    GOOGLE_APPLICATION_CREDENTIALS: str = os.getenv(
        "GOOGLE_APPLICATION_CREDENTIALS", "service_account.json"
    )
    FIRESTORE_DATABASE_ID: str = "(default)"

    LOG_LEVEL: str = "INFO"

    ENROLLMENTS_COLLECTION: str = "enrollments"
    USERS_COLLECTION: str = "users"
    COURSES_COLLECTION: str = "courses"

    # Enrollment rules
    CERTIFICATE_BASE_PATH: str = "/certificates"
    MIN_PROGRESS_TO_RATE: float = 20.0
    # When False, completing a course twice returns the certificate already issued
    REISSUE_CERTIFICATES: bool = False

    def __repr__(self):
        """Override __repr__ to prevent logging sensitive information"""
        return f"Settings(APP_TITLE='{self.APP_TITLE}', HOST='{self.HOST}', PORT={self.PORT})"

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.ALLOW_ORIGINS.split(",")]

    class Config:
        case_sensitive = True


settings = Settings()
