"""
Schema validator for raw news entries read from the data source
"""
from numbers import Real
from typing import Any, Dict

from models.news import NewsItem
from utils.errors import InvalidDataFormatError
from utils.logger import get_logger

logger = get_logger(__name__)

REQUIRED_TEXT_FIELDS = ('title', 'content', 'source', 'language')


class NewsValidator:
    """Validate raw news dictionaries before they reach curation"""

    @staticmethod
    def validate(raw: Dict[str, Any], index: int = 0) -> NewsItem:
        """
        Check field presence and types and build a NewsItem

        Args:
            raw: Entry of the "news" array
            index: Position of the entry, used in error messages

        Returns:
            Validated NewsItem

        Raises:
            InvalidDataFormatError: a field is missing or has the wrong type
        """
        if not isinstance(raw, dict):
            raise InvalidDataFormatError(f"news[{index}] is not an object")

        for field_name in REQUIRED_TEXT_FIELDS:
            value = raw.get(field_name)
            if not isinstance(value, str) or not value.strip():
                raise InvalidDataFormatError(f"news[{index}].{field_name} must be a non-empty string")

        categories = raw.get('categories')
        if not isinstance(categories, list) or not categories:
            raise InvalidDataFormatError(f"news[{index}].categories must be a non-empty list")
        for category in categories:
            if not isinstance(category, str) or not category.strip():
                raise InvalidDataFormatError(f"news[{index}].categories must contain non-empty strings")

        score = raw.get('relevanceScore')
        # bool is a Real subclass; true/false are not scores
        if isinstance(score, bool) or not isinstance(score, Real):
            raise InvalidDataFormatError(f"news[{index}].relevanceScore must be a number")
        if not 0 <= score <= 1:
            raise InvalidDataFormatError(f"news[{index}].relevanceScore must be between 0 and 1, got {score}")

        summary = raw.get('summary')
        if summary is not None and not isinstance(summary, str):
            raise InvalidDataFormatError(f"news[{index}].summary must be a string")

        return NewsItem.from_dict(raw)
