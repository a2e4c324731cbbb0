"""
Application settings and configuration

This file contains all the settings for the application.
Most settings can be changed by creating a .env file in the project root.
If a setting isn't in .env, it uses the default value shown here.

The curation core never reads these values directly: they are turned into
a CurationConfig (see below) and passed to the engine and the generator.
"""
import os
from dataclasses import dataclass
from dotenv import load_dotenv

# Load environment variables from .env file (if it exists)
load_dotenv()


class Settings:
    """
    Application configuration settings

    You can change these values by setting environment variables in a .env file.
    """

    # ============================================================
    # Data Source
    # ============================================================
    # JSON file holding the batch of news to curate: {"news": [...]}
    DATA_DIR = os.getenv("DATA_DIR", "data")
    NEWS_SOURCE_FILE = os.getenv("NEWS_SOURCE_FILE", os.path.join(DATA_DIR, "source-data.json"))

    # ============================================================
    # Database
    # ============================================================
    # SQLite file where approved news and their categories are stored
    DATABASE_PATH = os.getenv("DATABASE_PATH", os.path.join(DATA_DIR, "newsletter.db"))
    DB_INSERT_DELAY = float(os.getenv("DB_INSERT_DELAY", "0.1"))  # Pause between inserts

    # ============================================================
    # Gemini API Settings
    # ============================================================
    # Gemini writes the short summaries for long news content
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")  # Your Google API key (required!)
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

    # ============================================================
    # Curation Rules
    # ============================================================
    # News below this score are rejected (0 = not relevant, 1 = maximum relevance)
    RELEVANCE_SCORE_THRESHOLD = float(os.getenv("RELEVANCE_SCORE_THRESHOLD", "0.7"))

    # ============================================================
    # Summarization
    # ============================================================
    # Content longer than SUMMARY_TRIGGER_LENGTH characters is summarized
    # into at most SUMMARY_MAX_LENGTH characters
    SUMMARY_MAX_LENGTH = int(os.getenv("SUMMARY_MAX_LENGTH", "180"))
    SUMMARY_TRIGGER_LENGTH = int(os.getenv("SUMMARY_TRIGGER_LENGTH", "300"))
    SUMMARY_MAX_WORKERS = int(os.getenv("SUMMARY_MAX_WORKERS", "1"))  # 1 = sequential
    LLM_REQUEST_DELAY = float(os.getenv("LLM_REQUEST_DELAY", "0.5"))  # Wait between Gemini calls

    # ============================================================
    # Logging Settings
    # ============================================================
    # Options: DEBUG (very detailed), INFO (normal), WARNING (only problems), ERROR (only errors)
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LOG_FILE", "logs/app.log")

    @staticmethod
    def ensure_directories():
        """
        Create necessary directories if they don't exist

        Makes sure the data folder, the database folder and the log folder
        exist before the pipeline writes anything.
        """
        os.makedirs(Settings.DATA_DIR, exist_ok=True)
        db_dir = os.path.dirname(Settings.DATABASE_PATH)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
        os.makedirs(os.path.dirname(Settings.LOG_FILE) if os.path.dirname(Settings.LOG_FILE) else "logs", exist_ok=True)


@dataclass(frozen=True)
class CurationConfig:
    """
    Explicit configuration handed to the curation engine and the summary generator

    Attributes:
        relevance_threshold: Minimum relevance score, inclusive, in [0, 1]
        summary_max_length: Maximum number of characters of a summary
        content_length_trigger: Content longer than this is summarized
        max_workers: Size of the summarization worker pool (1 = sequential)
        request_delay: Seconds to wait after each summarization when sequential
    """
    relevance_threshold: float = 0.7
    summary_max_length: int = 180
    content_length_trigger: int = 300
    max_workers: int = 1
    request_delay: float = 0.0

    def __post_init__(self):
        if not 0.0 <= self.relevance_threshold <= 1.0:
            raise ValueError(f"relevance_threshold must be in [0, 1], got {self.relevance_threshold}")
        # Truncation keeps max_length - 3 characters plus "..."
        if self.summary_max_length < 4:
            raise ValueError(f"summary_max_length must be at least 4, got {self.summary_max_length}")
        if self.content_length_trigger < 0:
            raise ValueError(f"content_length_trigger must be >= 0, got {self.content_length_trigger}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.request_delay < 0:
            raise ValueError(f"request_delay must be >= 0, got {self.request_delay}")

    @classmethod
    def from_settings(cls, source: "Settings" = None) -> "CurationConfig":
        """Build the config from the environment-backed settings"""
        source = source or settings
        return cls(
            relevance_threshold=source.RELEVANCE_SCORE_THRESHOLD,
            summary_max_length=source.SUMMARY_MAX_LENGTH,
            content_length_trigger=source.SUMMARY_TRIGGER_LENGTH,
            max_workers=source.SUMMARY_MAX_WORKERS,
            request_delay=source.LLM_REQUEST_DELAY,
        )


# Global settings instance
settings = Settings()
