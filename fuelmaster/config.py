"""
Configuration de l'application / Application configuration.
Utilise pydantic-settings pour charger depuis .env ou variables d'environnement.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "FuelMaster"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = True

    # Database - SQLite par défaut (mode local) / SQLite by default (local mode)
    # PostgreSQL en production / PostgreSQL in production: postgresql+asyncpg://...
    DATABASE_URL: str = "sqlite+aiosqlite:///./fuelmaster.db"

    # CORS - origines autorisées / allowed origins
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_IMPORT: str = "10/minute"
    RATE_LIMIT_DEFAULT: str = "60/minute"

    # Import
    MAX_IMPORT_BYTES: int = 5 * 1024 * 1024

    # ITV : fenêtre d'anticipation sans décalage du cycle / early inspection window
    ITV_AMNESTY_DAYS: int = 30

    # ITV : horizon maximal de projection / furthest projected deadline (years after today)
    ITV_MAX_PROJECTION_YEARS: int = 10

    # Seuils d'alerte des comptes à rebours / Countdown alert thresholds (days)
    ALERT_CRITICAL_DAYS: int = 7
    ALERT_WARNING_DAYS: int = 30

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
