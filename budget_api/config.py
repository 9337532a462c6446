from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent

class Settings(BaseSettings):
    PROJECT_NAME: str = "Budget API"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api"

    DATABASE_URL: str = f"sqlite+aiosqlite:///{BASE_DIR}/data/budget.db"

    BACKEND_CORS_ORIGINS: list[str] = ["*"]

    LOG_LEVEL: str = "INFO"
    SEED_DEMO_DATA: bool = True

    # Accepted budget period bounds
    MIN_YEAR: int = 1970
    MAX_YEAR: int = 2100

    DEFAULT_PAGE_SIZE: int = 50
    MAX_PAGE_SIZE: int = 100

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

settings = Settings()
