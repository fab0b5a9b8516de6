from typing import Optional, List
from pydantic_settings import BaseSettings, SettingsConfigDict

from common.core.constants import CacheProviderType, Environment


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Environment Profile
    environment: Environment = Environment.LOCAL

    # API Settings
    app_name: str = "replydesk"
    api_version: str = "v1"
    debug: bool = False

    # Database Components
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "replydesk"
    db_use_nullpool: bool = (
        False  # True for one-shot scripts, False for API (concurrent)
    )
    db_pool_size: int = 10
    db_pool_overflow: int = 5

    @property
    def database_url(self) -> str:
        """Construct database URL from components."""
        return f"postgresql://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    # Redis
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: Optional[str] = None
    redis_db: int = 0
    redis_key_prefix: str = "replydesk"
    redis_socket_timeout: float = 2.0
    # Seconds to wait before retrying a failed Redis connection
    redis_retry_interval: float = 30.0

    # Cache
    cache_provider: CacheProviderType = CacheProviderType.REDIS
    cache_memory_max_entries: int = 10_000

    # OpenTelemetry
    otel_service_name: str = "replydesk-api"
    otel_service_version: str = "0.1.0"

    # Axiom (exporters are only attached when a token is configured)
    axiom_token: Optional[str] = None
    axiom_dataset: Optional[str] = None

    # Identity gateway headers
    identity_user_id_header: str = "X-User-Id"
    identity_email_header: str = "X-User-Email"

    # Invitations
    invitation_ttl_days: int = 7

    # Billing - Stripe
    stripe_secret_key: str = ""
    # Stripe price IDs, one per (plan, interval)
    stripe_price_id_basic_monthly: Optional[str] = None
    stripe_price_id_basic_yearly: Optional[str] = None
    stripe_price_id_pro_monthly: Optional[str] = None
    stripe_price_id_pro_yearly: Optional[str] = None

    @property
    def cors_allowed_origins(self) -> List[str]:
        """Auto-select CORS origins based on environment."""
        if self.environment == Environment.LOCAL:
            return [
                "http://localhost:3000",
                "http://localhost:3001",
            ]
        return [
            "https://replydesk.app",
            "https://api.replydesk.app",
        ]


settings = Settings()
