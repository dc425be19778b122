from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import List, Optional
import os
import json


DEFAULT_JWT_SECRET = "supersecretkey"


class Settings(BaseSettings):
    # Database connection, assembled into a URL unless database_url is given
    db_host: str = "localhost"
    db_port: int = 3306
    db_user: str = "root"
    db_password: str = "password"
    db_name: str = "ProductDB"
    database_url: Optional[str] = None
    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_pool_timeout: float = 30.0

    # HTTP listener
    host: str = "0.0.0.0"
    port: int = 3000

    # Token signing
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60

    # The single principal allowed to log in
    admin_username: str = "admin"
    admin_password: str = "password123"

    log_level: str = "INFO"
    environment: str = "local"
    # CORS origins - JSON array or comma-separated string
    cors_origins: str = "*"

    def get_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"mysql+aiomysql://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    def get_cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list, accepting JSON or comma-separated input."""
        try:
            origins = json.loads(self.cors_origins)
        except (json.JSONDecodeError, ValueError):
            origins = [o.strip() for o in self.cors_origins.split(",") if o.strip()]

        return origins if isinstance(origins, list) else [origins]

    @property
    def uses_default_secret(self) -> bool:
        return self.jwt_secret == DEFAULT_JWT_SECRET

    class Config:
        env_file = f"config/{os.getenv('ENV', 'local')}.env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    return Settings()
