"""Application configuration"""

from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "Entertainment Hub"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"

    # database
    DATABASE_URL: str
    SQL_ECHO: bool = False
    SSL_CA_PATH: Optional[str] = None

    # JWT
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_DAYS: int = 7
    BCRYPT_ROUNDS: int = 12

    # bootstrap admin
    ADMIN_EMAIL: str = "admin@entertainmenthub.com"
    ADMIN_PASSWORD: str = "admin123"
    ADMIN_USERNAME: str = "admin"

    # CORS
    FRONTEND_URL: Optional[str] = None
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    # Cloudinary
    CLOUDINARY_CLOUD_NAME: Optional[str] = None
    CLOUDINARY_API_KEY: Optional[str] = None
    CLOUDINARY_API_SECRET: Optional[str] = None
    CLOUDINARY_FOLDER: str = "entertainment-hub/items"
    MAX_UPLOAD_SIZE: int = 5 * 1024 * 1024

    # rate limits (slowapi notation)
    API_RATE_LIMIT: str = "100/15minutes"
    AUTH_RATE_LIMIT: str = "5/15minutes"
    CREATE_RATE_LIMIT: str = "50/hour"
    UPLOAD_RATE_LIMIT: str = "20/hour"

    # server
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=True, extra="ignore"
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def allowed_origins(self) -> List[str]:
        origins = [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]
        if self.FRONTEND_URL:
            frontend_url = self.FRONTEND_URL.rstrip("/")
            if frontend_url not in origins:
                origins.append(frontend_url)
        return origins


settings = Settings()
