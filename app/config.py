"""
app/config.py — Centralised settings loaded from .env with validation.

Upstream Configuration:
  - UPSTREAM_BASE_URL points at the Advice Slip API (http or https only)
  - Topics are appended as /advice/search/<escaped topic>
  - UPSTREAM_TIMEOUT_SECONDS bounds every outbound request
"""
from pydantic import Field, validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    upstream_base_url: str = Field("https://api.adviceslip.com", description="Advice Slip API base URL")
    upstream_timeout_seconds: float = Field(10.0, description="Outbound request timeout (seconds)")

    cache_ttl_seconds: int = Field(300, description="Cache time-to-live in seconds")

    host: str = Field("0.0.0.0", description="Interface the RPC server binds to")
    port: int = Field(10000, description="Port the RPC server listens on")
    rpc_path: str = Field("/rpc", description="HTTP path of the JSON-RPC endpoint")

    log_level: str = Field("INFO", description="Root logging level")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
        case_sensitive = False

    @validator('upstream_base_url')
    def validate_upstream_base_url(cls, v: str) -> str:
        if not v.startswith(('http://', 'https://')):
            raise ValueError(f"UPSTREAM_BASE_URL must start with 'http://' or 'https://', got: {v[:20]}...")
        return v.rstrip('/')

    @validator('cache_ttl_seconds')
    def validate_cache_ttl(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("CACHE_TTL_SECONDS must be positive")
        return v

    @validator('upstream_timeout_seconds')
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("UPSTREAM_TIMEOUT_SECONDS must be positive")
        return v

    @validator('rpc_path')
    def validate_rpc_path(cls, v: str) -> str:
        if not v.startswith('/'):
            raise ValueError(f"RPC_PATH must start with '/', got: {v}")
        return v


try:
    settings = Settings()
except Exception as e:
    raise RuntimeError(
        f"Failed to load settings from .env: {e}\n"
        "Check the environment variables overriding the defaults."
    ) from e
