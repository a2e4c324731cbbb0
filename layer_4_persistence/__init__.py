"""
Layer 4: Persistence
- News Repository (SQLite tables for news, categories and their association)
- Persist workflow (save every approved item of a curation report)
"""
from .news_repository import NewsRepository, NewsRecord, CategoryRecord
from .persist_news import PersistResult, persist_approved_news

__all__ = [
    'NewsRepository',
    'NewsRecord',
    'CategoryRecord',
    'PersistResult',
    'persist_approved_news',
]
