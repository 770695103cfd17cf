from pydantic import model_validator
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # ─── Application ───────────────────────────────────────────────────────────
    APP_NAME: str = "Stand Catalog"
    APP_ENV:  str = "development"
    APP_DEBUG: bool = True
    APP_HOST:  str = "0.0.0.0"
    APP_PORT:  int = 8000

    # ─── Database ──────────────────────────────────────────────────────────────
    DATABASE_URL:          str
    DATABASE_POOL_SIZE:    int  = 10
    DATABASE_MAX_OVERFLOW: int  = 20
    DATABASE_POOL_TIMEOUT: int  = 30
    DATABASE_ECHO:         bool = False

    # ─── JWT ───────────────────────────────────────────────────────────────────
    SECRET_KEY:                  str
    ALGORITHM:                   str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # ─── Field Encryption ──────────────────────────────────────────────────────
    ENCRYPTION_KEY: str
    HMAC_KEY:       str

    # ─── Passwords ─────────────────────────────────────────────────────────────
    BCRYPT_ROUNDS: int = 10

    # ─── Uploads ───────────────────────────────────────────────────────────────
    UPLOAD_DIR:             str = "uploads"
    UPLOAD_URL_PREFIX:      str = "/uploads"
    MAX_IMAGES_PER_REQUEST: int = 6

    # ─── CORS ──────────────────────────────────────────────────────────────────
    CORS_ORIGINS: str = "http://localhost:5173"

    @model_validator(mode="after")
    def check_distinct_keys(self) -> "Settings":
        if self.ENCRYPTION_KEY == self.HMAC_KEY:
            raise ValueError("ENCRYPTION_KEY and HMAC_KEY must be different secrets")
        return self

    def get_cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",")]

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"

    model_config = {"env_file": ".env", "case_sensitive": True, "extra": "ignore"}


settings = Settings()
