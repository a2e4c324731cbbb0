"""
Load workflow: check the data source, read the batch and report what happened

This step never raises. A missing or broken source yields an empty batch
and the reason is kept in LoadNewsResult.errors for the final report.
"""
import time
from dataclasses import dataclass, field
from typing import List, Optional

from models.news import NewsItem
from layer_1_data_import.news_source import DataSourceInfo, NewsDataSource
from utils.errors import NewsDataSourceError
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class LoadNewsResult:
    """Result of loading one batch"""
    news: List[NewsItem] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    source_info: Optional[DataSourceInfo] = None
    execution_time_ms: float = 0.0

    @property
    def total_loaded(self) -> int:
        return len(self.news)


def load_news_from_source(source: NewsDataSource) -> LoadNewsResult:
    """
    Load news from a data source

    Args:
        source: Any NewsDataSource (JsonNewsSource in production)

    Returns:
        LoadNewsResult with the loaded news, or no news and the error messages
    """
    start = time.monotonic()
    result = LoadNewsResult()

    if not source.is_source_available():
        message = "Data source is not available"
        logger.error(message)
        result.errors.append(message)
        result.execution_time_ms = (time.monotonic() - start) * 1000
        return result

    try:
        result.source_info = source.get_source_info()
        result.news = source.load_news()
    except NewsDataSourceError as e:
        logger.error(f"Error while loading news [{e.code}]: {e}")
        result.news = []
        result.errors.append(str(e))

    result.execution_time_ms = (time.monotonic() - start) * 1000
    logger.info(f"Loaded {result.total_loaded} news items in {result.execution_time_ms:.0f}ms")
    return result
