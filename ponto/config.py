import os


class Settings:
    """Application settings read from the environment"""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./ponto.db")

    # JWT issued by the identity provider (shared secret)
    SECRET_KEY: str = os.getenv("SECRET_KEY", "your-super-secret-key-change-this-in-production")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")

    # Application
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
    TIMEZONE: str = os.getenv("TIMEZONE", "America/Sao_Paulo")

    # Deployment
    PORT: int = int(os.getenv("PORT", "8000"))
    HOST: str = os.getenv("HOST", "0.0.0.0")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    # Photo storage
    STORAGE_ROOT: str = os.getenv("STORAGE_ROOT", "./storage")
    STORAGE_BUCKET: str = os.getenv("STORAGE_BUCKET", "point-photos")
    PUBLIC_BASE_URL: str = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000/storage")
    MAX_PHOTO_SIZE: int = int(os.getenv("MAX_PHOTO_SIZE", "5242880"))  # 5MB
    ALLOWED_PHOTO_TYPES: list = os.getenv("ALLOWED_PHOTO_TYPES", "image/jpeg,image/png,image/webp").split(",")

    # Company settings defaults, used when the singleton row is first created
    DEFAULT_GEOFENCE_LAT: float = float(os.getenv("DEFAULT_GEOFENCE_LAT", "-23.5505"))
    DEFAULT_GEOFENCE_LNG: float = float(os.getenv("DEFAULT_GEOFENCE_LNG", "-46.6333"))
    DEFAULT_GEOFENCE_RADIUS: int = int(os.getenv("DEFAULT_GEOFENCE_RADIUS", "100"))
    DEFAULT_TOLERANCE_MINUTES: int = int(os.getenv("DEFAULT_TOLERANCE_MINUTES", "15"))
    DEFAULT_PHOTO_RETENTION_DAYS: int = int(os.getenv("DEFAULT_PHOTO_RETENTION_DAYS", "30"))

    # Face verification stub
    FACE_MATCH_THRESHOLD: float = float(os.getenv("FACE_MATCH_THRESHOLD", "0.85"))

    # Capture client
    LOCATION_TIMEOUT_SECONDS: float = float(os.getenv("LOCATION_TIMEOUT_SECONDS", "10"))
    MAX_POSITION_AGE_SECONDS: float = float(os.getenv("MAX_POSITION_AGE_SECONDS", "60"))
    CLIENT_RETRY_ATTEMPTS: int = int(os.getenv("CLIENT_RETRY_ATTEMPTS", "3"))
    CLIENT_RETRY_DELAY_SECONDS: float = float(os.getenv("CLIENT_RETRY_DELAY_SECONDS", "0.5"))

    # Pagination
    DEFAULT_PAGE_SIZE: int = int(os.getenv("DEFAULT_PAGE_SIZE", "50"))
    MAX_PAGE_SIZE: int = int(os.getenv("MAX_PAGE_SIZE", "500"))

    # API
    API_VERSION: str = os.getenv("API_VERSION", "v1")
    API_PREFIX: str = f"/api/{API_VERSION}"

    @property
    def database_url(self) -> str:
        """Database URL, normalising the Heroku/Render `postgres://` scheme"""
        url = self.DATABASE_URL
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        return url

    @property
    def is_production(self) -> bool:
        return not self.DEBUG

    def validate_required_settings(self) -> list:
        """Return the names of required settings that are missing"""
        missing = []

        if not self.DATABASE_URL:
            missing.append("DATABASE_URL")

        if not self.SECRET_KEY or self.SECRET_KEY == "your-super-secret-key-change-this-in-production":
            missing.append("SECRET_KEY")

        if not self.STORAGE_ROOT:
            missing.append("STORAGE_ROOT")

        return missing

    def get_logging_config(self) -> dict:
        """dictConfig for the operational log channel"""
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": self.LOG_FORMAT,
                },
            },
            "handlers": {
                "default": {
                    "formatter": "default",
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {
                "level": self.LOG_LEVEL,
                "handlers": ["default"],
            },
        }


# Global settings instance
settings = Settings()
