import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # API settings
    api_host: str = os.getenv("API_HOST", "127.0.0.1")
    api_port: int = int(os.getenv("API_PORT", "8000"))

    # Database settings
    database_file: str = os.getenv("LIBRARY_DB_FILE", "booknotes.db")

    # OpenLibrary settings
    openlibrary_url: str = os.getenv("OPENLIBRARY_URL", "https://openlibrary.org")
    openlibrary_timeout: float = float(os.getenv("OPENLIBRARY_TIMEOUT", "10"))
    suggestion_limit: int = int(os.getenv("SUGGESTION_LIMIT", "5"))

    # Application settings
    app_name: str = os.getenv("APP_NAME", "Book Notes")
    debug: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
