from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # API configurations
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "HRDesk"
    ENVIRONMENT: str = "development"

    # CORS configurations
    CORS_ORIGINS: list = [
        "http://localhost",
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Logging configurations
    LOG_LEVEL: str = "INFO"

    # Database 1 configurations
    DB1_URI: str = "mongodb://localhost:27017"
    DB1_NAME: str = "hrdesk"

    # JWT configurations
    JWT_SECRET: str = "change-me-in-production"
    JWT_EXP_DELTA_MINUTES: int = 10080  # 7 days

    # Passwords
    PASSWORD_HASH_ROUNDS: int = 12
    DEFAULT_EMPLOYEE_PASSWORD: str = "password123"

    # Timezone used for "today" in date validations and audit stamps
    TIMEZONE: str = "Asia/Kolkata"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

settings = Settings()
