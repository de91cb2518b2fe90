"""
Configuration settings for the application
"""

from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Version store
    VERSIONS_BACKEND: str = "file"  # file | sql
    VERSIONS_DIR: str = "data/versions"
    DATABASE_URL: str = "sqlite:///./seating_versions.db"

    # Local-device store
    LOCAL_STORAGE_FILE: str = "data/local_storage.json"
    LOCAL_VERSIONS_LIMIT: int = 20

    # Client
    API_BASE_URL: str = "http://localhost:8000/api"

    # CORS
    ALLOW_ORIGINS: List[str] = ["*"]

    # Canvas
    GRID_SIZE: int = 24

settings = Settings()
