"""
Configuration settings for the networking tools backend.
"""

from pydantic_settings import BaseSettings
from pydantic import ConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Networking Tools API"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 3001

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:3002",
        "https://networking-tools.vercel.app",
    ]

    # External lookups
    mac_vendor_api_url: str = "https://api.macvendors.com"
    mac_lookup_timeout: float = 10.0
    geo_api_url: str = "http://ip-api.com/json"
    geo_lookup_timeout: float = 5.0  # per hop, in seconds
    geo_lookup_parallelism: int = 30  # number of concurrent geo lookups

    # Diagnostic commands (dig/nslookup, traceroute/tracert)
    command_timeout: int = 120

    model_config = ConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


# Global settings instance
settings = Settings()
