from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    APP_NAME: str = "Hitaishi Careers"
    ENVIRONMENT: str = "development"  # 'development' | 'production'
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    BACKEND_CORS_ORIGINS: str = (
        "http://localhost:3000,"
        "http://127.0.0.1:3000"
    )

    # Database
    DATABASE_URL: str = "sqlite:///./careers.db"

    # Session tokens (required, checked when the app is built)
    SECRET_KEY: str = ""
    ALGORITHM: str = "HS256"
    CANDIDATE_TOKEN_EXPIRE_MINUTES: int = 7 * 24 * 60
    EMPLOYER_TOKEN_EXPIRE_MINUTES: int = 24 * 60
    TOKEN_COOKIE_NAME: str = "token"

    # Password hashing
    BCRYPT_ROUNDS: int = 12

    # Google sign-in: every client platform registers its own audience
    GOOGLE_CLIENT_IDS: str = ""
    GOOGLE_ISSUERS: str = "accounts.google.com,https://accounts.google.com"
    GOOGLE_CERTS_URL: str = "https://www.googleapis.com/oauth2/v3/certs"
    FEDERATED_CLOCK_SKEW_SECONDS: int = 10

    @property
    def cookie_secure(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def cors_origins(self) -> list[str]:
        return split_csv(self.BACKEND_CORS_ORIGINS)

    @property
    def google_audiences(self) -> list[str]:
        return split_csv(self.GOOGLE_CLIENT_IDS)

    @property
    def google_issuers(self) -> list[str]:
        return split_csv(self.GOOGLE_ISSUERS)


def split_csv(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


settings = Settings()
