"""
Save the approved news of a curation report
"""
import time
from dataclasses import dataclass, field
from typing import List, Sequence

from models.news import NewsItem
from layer_4_persistence.news_repository import NewsRepository
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class PersistResult:
    inserted_ids: List[int] = field(default_factory=list)
    failed_titles: List[str] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.inserted_ids)

    @property
    def failure_count(self) -> int:
        return len(self.failed_titles)


def persist_approved_news(repository: NewsRepository, items: Sequence[NewsItem],
                          delay: float = 0.0) -> PersistResult:
    """
    Insert each approved item; one failed insert does not stop the others

    Args:
        repository: Open NewsRepository
        items: Approved news, already summarized
        delay: Seconds to wait between inserts

    Returns:
        PersistResult with inserted ids and the titles that failed
    """
    logger.info(f"Saving {len(items)} news items...")
    result = PersistResult()

    for idx, item in enumerate(items):
        news_id = repository.insert_news(item)
        if news_id is None:
            result.failed_titles.append(item.title)
        else:
            result.inserted_ids.append(news_id)
            logger.info(f"News saved: \"{item.title}\"")

        if delay > 0 and idx < len(items) - 1:
            time.sleep(delay)

    logger.info(f"{result.success_count}/{len(items)} news items saved successfully")
    return result
