"""
Configuration settings for the Fleet Inspect Backend.

This module handles application configuration using Pydantic settings.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""
    
    # Application
    app_name: str = "Fleet Inspect Backend"
    api_version: str = "v1"
    debug: bool = True
    log_level: str = "INFO"
    seed_demo_data: bool = True
    
    # Database Configuration
    database_url: str = "sqlite+aiosqlite:///./fleet.db"
    db_echo: bool = False
    db_pool_size: int = 20
    db_max_overflow: int = 10
    
    # Security Configuration (JWT)
    secret_key: str = "your-secret-key-change-this-in-production-min-32-chars"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 12 * 60
    
    # Redis Configuration (per-vehicle locks)
    redis_url: str = "redis://localhost:6379/0"
    redis_decode_responses: bool = True
    vehicle_lock_ttl_seconds: int = 30
    vehicle_lock_timeout_seconds: float = 5.0
    
    # Evidence limits (boundary checks on report submission)
    max_file_size_bytes: int = 2 * 1024 * 1024
    max_evidence_bytes: int = 8 * 1024 * 1024
    
    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
