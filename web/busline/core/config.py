import os
from typing import List
from functools import lru_cache


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings:
    """Application settings read from the environment"""

    STORE_BACKENDS = ("sql", "memory")

    def __init__(self):
        # Store
        self.STORE_BACKEND: str = os.getenv("STORE_BACKEND", "sql").lower()
        self.DB_DSN: str = os.getenv("DB_DSN", "")
        self.DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "5"))
        self.DB_ECHO: bool = _env_bool("DB_ECHO")

        # Security
        self.SECRET_KEY: str = os.getenv("SECRET_KEY", "")
        self.ALGORITHM: str = "HS256"
        self.ACCESS_TOKEN_EXPIRE_SECONDS: int = int(os.getenv("JWT_ACCESS_TTL", "900"))  # 15 minutes
        self.REFRESH_TOKEN_EXPIRE_SECONDS: int = int(os.getenv("JWT_REFRESH_TTL", str(60 * 60 * 24 * 30)))  # 30 days
        self.ADMIN_API_KEY: str = os.getenv("ADMIN_API_KEY", "")

        # CORS
        self.CORS_ALLOW_ORIGINS: List[str] = []
        self.CORS_ALLOW_CREDENTIALS: bool = True

        # Rate Limiting
        self.RATE_LIMIT_DEFAULT: str = os.getenv("RATE_LIMIT_DEFAULT", "100/minute")
        self.RATE_LIMIT_ENABLED: bool = _env_bool("RATE_LIMIT_ENABLED", "true")

        # Business Rules
        self.RESERVATION_MAX_ATTEMPTS: int = int(os.getenv("RESERVATION_MAX_ATTEMPTS", "3"))
        self.PAYMENT_DELAY_SECONDS: float = float(os.getenv("PAYMENT_DELAY_SECONDS", "2.0"))
        self.SEED_DEMO_ROUTES: bool = _env_bool("SEED_DEMO_ROUTES")

        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

        self._validate()
        self._parse_cors_origins()

    def _validate(self):
        """Validate required settings"""
        if not self.SECRET_KEY:
            raise ValueError("SECRET_KEY environment variable must be set")
        if self.STORE_BACKEND not in self.STORE_BACKENDS:
            raise ValueError(f"STORE_BACKEND must be one of {', '.join(self.STORE_BACKENDS)}")
        if self.STORE_BACKEND == "sql" and not self.DB_DSN:
            raise ValueError("DB_DSN environment variable must be set")
        if self.RESERVATION_MAX_ATTEMPTS < 1:
            raise ValueError("RESERVATION_MAX_ATTEMPTS must be at least 1")
        if self.PAYMENT_DELAY_SECONDS < 0:
            raise ValueError("PAYMENT_DELAY_SECONDS must not be negative")

    def _parse_cors_origins(self):
        """Parse CORS origins from environment"""
        raw_origins = os.getenv("CORS_ALLOW_ORIGINS", "*")

        if raw_origins.strip() == "*":
            self.CORS_ALLOW_ORIGINS = ["*"]
            self.CORS_ALLOW_CREDENTIALS = False  # wildcard forbids credentials
        else:
            self.CORS_ALLOW_ORIGINS = [o.strip() for o in raw_origins.split(",") if o.strip()]
            self.CORS_ALLOW_CREDENTIALS = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
