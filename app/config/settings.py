# app/config/settings.py
# Environment-driven settings for the Task Manager API

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings read from the environment (or a .env file)"""

    # Database
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./taskmanager.db")
    DB_SSLMODE = os.getenv("DB_SSLMODE")

    # JWT
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
    ALGORITHM = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 7 * 24 * 60))

    # HTTP
    CORS_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv(
            "CORS_ORIGINS",
            "http://localhost:3000,http://localhost:3001,http://127.0.0.1:3000",
        ).split(",")
        if origin.strip()
    ]

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Server (start_server.py)
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "8000"))
    RELOAD = os.getenv("RELOAD", "true").lower() == "true"

    @classmethod
    def is_sqlite(cls) -> bool:
        """True when DATABASE_URL points at SQLite"""
        return cls.DATABASE_URL.startswith("sqlite")

    @classmethod
    def engine_connect_args(cls) -> dict:
        """Driver specific connect args for create_engine"""
        if cls.is_sqlite():
            # FastAPI serves sync routes from a threadpool
            return {"check_same_thread": False}
        if cls.DB_SSLMODE:
            return {"sslmode": cls.DB_SSLMODE}
        return {}


settings = Settings()
