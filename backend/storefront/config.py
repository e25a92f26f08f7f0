from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./dev.db"
    APP_HOST: str = "127.0.0.1"
    APP_PORT: int = 8000
    FRONTEND_ORIGINS: List[str] = ["http://localhost:3000"]
    RESET_DB: bool = False
    LOG_LEVEL: str = "INFO"

    # header set by the identity gateway once the session is verified
    AUTH_USER_HEADER: str = "X-User-Id"
    # svix signing secret of the identity provider webhook ("whsec_...")
    WEBHOOK_SECRET: Optional[str] = None

    FREE_SHIPPING_THRESHOLD: int = 50000
    SHIPPING_FEE: int = 3000
    FEATURED_LIMIT: int = 6

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
