import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./icp_builder.db"


def get_database_url() -> str:
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


def get_ollama_base_url() -> str:
    return os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")


def get_ollama_model() -> str:
    return os.getenv("OLLAMA_MODEL", "llama3.2:3b")


def get_default_user_id() -> str:
    """Owner of all data until authentication exists."""
    return os.getenv(
        "DEFAULT_USER_ID",
        os.getenv("TEST_USER_ID", "11111111-1111-1111-1111-111111111111"),
    )


def get_default_user_email() -> str:
    return os.getenv("DEFAULT_USER_EMAIL", "test@example.com")


def get_icp_min_filled_fields() -> int:
    return int(os.getenv("ICP_MIN_FILLED_FIELDS", "5"))


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_cors_origins() -> list[str]:
    raw = os.getenv("CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
