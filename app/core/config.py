from pydantic_settings import BaseSettings
from typing import Optional, List

class Settings(BaseSettings):
    PROJECT_NAME: str = "Course Catalog Core"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 2  # 2 days

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
        "http://127.0.0.1:3000",
    ]

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./course_catalog.db"

    # Blob storage
    STORAGE_BACKEND: str = "local"  # local, s3
    LOCAL_STORAGE_PATH: str = "storage"
    AWS_REGION: str = "us-east-1"
    S3_BUCKET_NAME: Optional[str] = None
    MAX_IMAGE_SIZE: int = 5 * 1024 * 1024

    # Catalog
    CACHE_TTL: int = 300
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    LOG_DIR: str = "logs"

    class Config:
        env_file = ".env"

settings = Settings()
