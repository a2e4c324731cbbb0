"""
News data sources

A data source loads one batch of NewsItem. The only implementation reads a
JSON file shaped like {"news": [{...}, ...]}.
"""
import json
import os
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Protocol

from models.news import NewsItem
from layer_1_data_import.validator import NewsValidator
from utils.errors import (
    DataSourceAccessError,
    DataSourceNotFoundError,
    InvalidDataFormatError,
    NewsDataSourceError,
)
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class DataSourceInfo:
    """Metadata about a data source"""
    source_type: str  # file, api, database...
    location: str
    last_modified: Optional[datetime] = None
    size: Optional[int] = None  # bytes


class NewsDataSource(Protocol):
    def load_news(self) -> List[NewsItem]:  # pragma: no cover - interface
        ...

    def is_source_available(self) -> bool:  # pragma: no cover - interface
        ...

    def get_source_info(self) -> DataSourceInfo:  # pragma: no cover - interface
        ...


class JsonNewsSource:
    """Read news from a JSON file"""

    def __init__(self, file_path: str):
        self.file_path = file_path

    def load_news(self) -> List[NewsItem]:
        """
        Load and validate every news entry of the file

        Raises:
            DataSourceNotFoundError: the file does not exist
            DataSourceAccessError: the file cannot be read
            InvalidDataFormatError: empty file, bad JSON or bad entries
        """
        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                file_content = f.read()
        except FileNotFoundError as e:
            raise DataSourceNotFoundError(self.file_path) from e
        except PermissionError as e:
            raise DataSourceAccessError(self.file_path, "permission denied") from e
        except (OSError, UnicodeDecodeError) as e:
            raise DataSourceAccessError(self.file_path, str(e)) from e

        if not file_content.strip():
            raise InvalidDataFormatError("File is empty")

        try:
            data = json.loads(file_content)
        except json.JSONDecodeError as e:
            raise InvalidDataFormatError(f"Invalid JSON format: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get('news'), list):
            raise InvalidDataFormatError("Invalid JSON structure: missing news array")

        items = [NewsValidator.validate(raw, idx) for idx, raw in enumerate(data['news'])]
        logger.info(f"Loaded {len(items)} news items from {self.file_path}")
        return items

    def is_source_available(self) -> bool:
        return os.path.isfile(self.file_path) and os.access(self.file_path, os.R_OK)

    def get_source_info(self) -> DataSourceInfo:
        try:
            stats = os.stat(self.file_path)
        except FileNotFoundError as e:
            raise DataSourceNotFoundError(self.file_path) from e
        except OSError as e:
            raise DataSourceAccessError(self.file_path, str(e)) from e

        return DataSourceInfo(
            source_type='file',
            location=os.path.abspath(self.file_path),
            last_modified=datetime.fromtimestamp(stats.st_mtime),
            size=stats.st_size,
        )


__all__ = [
    'DataSourceInfo',
    'JsonNewsSource',
    'NewsDataSource',
    'NewsDataSourceError',
]
