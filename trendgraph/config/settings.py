"""Application settings and configuration"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "Trendgraph"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Trend window defaults
    TREND_BUILD_COUNT: int = 50  # 0 disables the build count cutoff
    TREND_DAY_COUNT: int = 0  # 0 disables the age cutoff
    TREND_USE_BUILD_DATE: bool = False

    # Date domain
    TREND_TIME_ZONE: str = "UTC"
    TREND_DATE_LABEL_FORMAT: str = "%m-%d"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env


settings = Settings()
