"""
SQLite storage for approved news and their categories

Tables:
- news: one row per approved news item
- categories: unique category names (case-sensitive)
- news_categories: many-to-many association
"""
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from config.settings import settings
from models.news import NewsItem
from utils.errors import DatabaseConnectionError, DatabaseTransactionError
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS news (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    content TEXT NOT NULL,
    summary TEXT,
    source TEXT NOT NULL,
    relevance_score REAL NOT NULL,
    language TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS categories (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS news_categories (
    news_id INTEGER NOT NULL REFERENCES news(id) ON DELETE CASCADE,
    category_id INTEGER NOT NULL REFERENCES categories(id) ON DELETE CASCADE,
    PRIMARY KEY (news_id, category_id)
);
"""


@dataclass
class CategoryRecord:
    id: int
    name: str


@dataclass
class NewsRecord:
    """Stored news row with its category names"""
    id: int
    title: str
    content: str
    source: str
    relevance_score: float
    language: str
    published_at: str
    summary: Optional[str] = None
    categories: List[CategoryRecord] = field(default_factory=list)


class NewsRepository:
    """Persist approved news in SQLite"""

    def __init__(self, database_path: str = None):
        """
        Open the database and create the tables if needed

        Args:
            database_path: SQLite file path (":memory:" works for tests)

        Raises:
            DatabaseConnectionError: the database file cannot be opened
        """
        self.database_path = database_path or settings.DATABASE_PATH
        try:
            # Autocommit mode; transactions are opened explicitly
            self.conn = sqlite3.connect(self.database_path, isolation_level=None)
        except sqlite3.Error as e:
            raise DatabaseConnectionError(f"{self.database_path}: {e}") from e
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA foreign_keys = ON")
        self.init_schema()

    def init_schema(self):
        self.conn.executescript(SCHEMA)

    def test_connection(self) -> bool:
        """Run a trivial query to check the database answers"""
        try:
            row = self.conn.execute("SELECT datetime('now') AS now").fetchone()
            logger.info(f"Database time: {row['now']}")
            return True
        except sqlite3.Error as e:
            logger.error(f"Error connecting to database: {e}")
            return False

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[sqlite3.Cursor]:
        cursor = self.conn.cursor()
        cursor.execute("BEGIN")
        try:
            yield cursor
        except sqlite3.Error as e:
            cursor.execute("ROLLBACK")
            raise DatabaseTransactionError(operation, str(e)) from e
        except Exception:
            cursor.execute("ROLLBACK")
            raise
        else:
            cursor.execute("COMMIT")
        finally:
            cursor.close()

    def insert_news(self, item: NewsItem) -> Optional[int]:
        """
        Insert a news item and associate its categories in one transaction

        Returns:
            The new news id, or None when the transaction was rolled back
        """
        try:
            with self._transaction("insert_news") as cur:
                cur.execute(
                    """
                    INSERT INTO news (title, content, summary, source, relevance_score, language)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (item.title, item.content, item.summary, item.source, item.relevance_score, item.language),
                )
                news_id = cur.lastrowid

                for category_name in item.categories:
                    category_id = self._get_or_create_category(cur, category_name)
                    cur.execute(
                        "INSERT OR IGNORE INTO news_categories (news_id, category_id) VALUES (?, ?)",
                        (news_id, category_id),
                    )
        except DatabaseTransactionError as e:
            logger.error(f"Error inserting news \"{item.title}\": {e}")
            return None

        logger.info(f"News inserted with ID {news_id} ({len(item.categories)} categories)")
        return news_id

    def insert_category(self, name: str) -> Optional[CategoryRecord]:
        """
        Insert a category, or return the existing one with the same exact name

        Returns:
            The category record, or None on database error
        """
        try:
            with self._transaction("insert_category") as cur:
                category_id = self._get_or_create_category(cur, name)
        except DatabaseTransactionError as e:
            logger.error(f"Error inserting category '{name}': {e}")
            return None
        return CategoryRecord(id=category_id, name=name)

    def get_all_news(self) -> List[NewsRecord]:
        """All stored news, newest first, with their categories"""
        rows = self.conn.execute(
            """
            SELECT id, title, content, summary, source, relevance_score, language, created_at
            FROM news
            ORDER BY created_at DESC, id DESC
            """
        ).fetchall()

        records = []
        for row in rows:
            categories = self.conn.execute(
                """
                SELECT c.id, c.name
                FROM categories c
                JOIN news_categories nc ON nc.category_id = c.id
                WHERE nc.news_id = ?
                ORDER BY c.name
                """,
                (row['id'],),
            ).fetchall()
            records.append(NewsRecord(
                id=row['id'],
                title=row['title'],
                content=row['content'],
                summary=row['summary'],
                source=row['source'],
                relevance_score=row['relevance_score'],
                language=row['language'],
                published_at=row['created_at'],
                categories=[CategoryRecord(id=c['id'], name=c['name']) for c in categories],
            ))
        return records

    def get_all_categories(self) -> List[CategoryRecord]:
        rows = self.conn.execute("SELECT id, name FROM categories ORDER BY name").fetchall()
        return [CategoryRecord(id=row['id'], name=row['name']) for row in rows]

    def close(self):
        self.conn.close()
        logger.info("Database connection closed")

    @staticmethod
    def _get_or_create_category(cur: sqlite3.Cursor, name: str) -> int:
        row = cur.execute("SELECT id FROM categories WHERE name = ?", (name,)).fetchone()
        if row is not None:
            return row['id']
        cur.execute("INSERT INTO categories (name) VALUES (?)", (name,))
        return cur.lastrowid
