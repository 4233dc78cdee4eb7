from typing import List, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application Information
    app_name: str = Field(default="Peekhour API")
    app_description: str = Field(default="Location-based social networking platform")
    app_version: str = Field(default="1.0.0")
    app_url: str = Field(default="http://localhost:8000")
    frontend_url: str = Field(default="http://localhost:3000")
    debug: bool = Field(default=True)
    production: bool = Field(default=False)

    # Database Configuration
    database_url: Optional[str] = Field(default=None)  # Overrides the db_* parts
    db_host: str = Field(default="127.0.0.1")
    db_port: int = Field(default=5432)
    db_database: str = Field(default="peekhour")
    db_username: str = Field(default="peekhour")
    db_password: str = Field(default="peekhour")

    # Security Settings
    cors_allowed_origins: List[str] = Field(default=["http://localhost:3000"])

    # JWT Configuration
    jwt_secret: str = Field(default="your-secret-key-change-in-production")
    jwt_algorithm: str = Field(default="HS256")
    jwt_user_expiration: int = Field(default=7)  # days
    jwt_issuer: str = Field(default="Peekhour")

    # Rate limiting (slowapi); point at redis_url in production
    redis_url: str = Field(default="redis://localhost:6379")
    rate_limit_storage_uri: str = Field(default="memory://")
    redis_rate_limit: str = Field(default="120/minute")

    # Logging
    log_level: str = Field(default="info")
    log_file: str = Field(default="logs/app.log")

    # Pagination
    default_page_size: int = Field(default=20)
    max_page_size: int = Field(default=100)

    # Comments
    comment_max_depth: int = Field(default=5)

    # Background jobs (ban expiry)
    scheduler_enabled: bool = Field(default=True)

    @property
    def sqlalchemy_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return "postgresql+psycopg2://{user}:{password}@{host}:{port}/{database}".format(
            user=self.db_username,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_database,
        )

    # ============================
    # Generic comma-separated parser
    # ============================
    @staticmethod
    def _parse_csv(value, default):
        if isinstance(value, str):
            items = [x.strip() for x in value.split(",") if x.strip()]
            return items if items else default
        if isinstance(value, list):
            return value
        return default

    @field_validator("cors_allowed_origins", mode="before")
    def validate_cors(cls, v):
        return cls._parse_csv(v, ["http://localhost:3000"])

    @field_validator("comment_max_depth")
    def validate_comment_depth(cls, v):
        if v < 1:
            raise ValueError("comment_max_depth must be at least 1")
        return v

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


def load_settings():
    try:
        settings = Settings()
        print("✅ Settings loaded successfully!")
        return settings
    except ValidationError as e:
        print("❌ Validation Error:", e)
        raise


settings = load_settings()
