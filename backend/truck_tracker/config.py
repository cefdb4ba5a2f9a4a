from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./trucks.db"
    SQL_ECHO: bool = False

    LOG_LEVEL: str = "INFO"

    # Map view used when no truck has a position yet
    DEFAULT_CENTER_LATITUDE: float = 30.0
    DEFAULT_CENTER_LONGITUDE: float = 10.0
    DEFAULT_ZOOM: int = 4

    # Startup connection retries
    DB_CONNECT_RETRIES: int = 10
    DB_RETRY_DELAY: float = 5.0

    # Base URL used by the command line client scripts
    API_URL: str = "http://localhost:8000"

    class Config:
        env_file = ".env"
        extra = "allow"

settings = Settings()
