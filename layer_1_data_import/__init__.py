"""
Layer 1: Data Import & Validation
- JSON Data Source (reads the {"news": [...]} batch file)
- Schema Validator (ensure required fields exist and have the right type)
- Load workflow (availability check, load, error report)
"""
from .validator import NewsValidator
from .news_source import JsonNewsSource, NewsDataSource, DataSourceInfo
from .load_news import LoadNewsResult, load_news_from_source

__all__ = [
    'NewsValidator',
    'JsonNewsSource',
    'NewsDataSource',
    'DataSourceInfo',
    'LoadNewsResult',
    'load_news_from_source',
]
