"""
Application settings and environment configuration.

Purpose:
- Centralize config for the batch submitter and the local users service
- Load from environment variables / .env
- Defaults match the fixed local setup (data.json -> localhost:8080)
"""
import os
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Target endpoint for create-user requests
    USERS_API_URL: str = os.getenv("USERS_API_URL", "http://localhost:8080/api/users")

    # Input file, relative to the working directory
    DATA_FILE: str = os.getenv("DATA_FILE", "data.json")

    # Per-request timeout in seconds; None means block until the server answers
    REQUEST_TIMEOUT: float | None = None

    # Values: DEBUG, INFO, WARNING, ERROR, CRITICAL
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Local users service (microservices/users_service_app.py)
    USERS_SERVICE_HOST: str = os.getenv("USERS_SERVICE_HOST", "0.0.0.0")
    USERS_SERVICE_PORT: int = int(os.getenv("USERS_SERVICE_PORT", "8080"))

    # Minimum age (full years) accepted by the users service
    USER_MIN_AGE: int = int(os.getenv("USER_MIN_AGE", "18"))

    class Config:
        env_file = ".env"
        extra = "allow"
        env_ignore_empty = True


settings = Settings()
