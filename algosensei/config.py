"""
Configuration management for AlgoSensei API
Uses pydantic-settings for environment variable validation
"""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_RELOAD: bool = True
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Application
    APP_NAME: str = "AlgoSensei"
    APP_VERSION: str = "0.1.0"

    # Sessions (no default for the secret)
    SESSION_SECRET: str = ""  # Required: set via environment variable
    SESSION_TTL_MINUTES: int = 7 * 24 * 60  # 7 days
    SESSION_COOKIE_NAME: str = "algosensei_session"
    SESSION_COOKIE_SECURE: bool = False

    # Azure OpenAI (all required, reached through LiteLLM)
    AZURE_OPENAI_ENDPOINT: str = ""
    AZURE_OPENAI_KEY: str = ""
    AZURE_OPENAI_DEPLOYMENT: str = ""
    AZURE_OPENAI_API_VERSION: str = ""

    # Chat generation
    CHAT_TEMPERATURE: float = 0.7
    CHAT_MAX_TOKENS: int = 4096
    LLM_TIMEOUT: int = 60  # Timeout in seconds for LLM requests

    # Storage
    STORAGE_BACKEND: str = "local"  # "local", "s3" or "mongo"
    STORAGE_DIR: str = "./data/records"

    # S3 Storage (if STORAGE_BACKEND="s3")
    S3_BUCKET_NAME: str = ""
    S3_ACCESS_KEY_ID: str = ""  # Optional: uses AWS credentials if empty
    S3_SECRET_ACCESS_KEY: str = ""  # Optional: uses AWS credentials if empty
    S3_REGION: str = "us-east-1"
    S3_ENDPOINT_URL: str = ""  # Optional: for MinIO, Azurite gateways, etc.

    # MongoDB (if STORAGE_BACKEND="mongo")
    MONGODB_URI: str = ""
    MONGODB_DATABASE: str = "algosensei"
    MONGODB_COLLECTION: str = "records"

    # Long-term memory service (optional, mem0-compatible)
    MEM0_BASE_URL: str = "https://api.mem0.ai"
    MEM0_API_KEY: str = ""  # Empty = memory disabled
    MEM0_TIMEOUT: float = 10.0

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    RATE_LIMIT_AI: str = "10/minute"
    RATE_LIMIT_AUTH: str = "5/minute"

    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()
