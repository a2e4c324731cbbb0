"""
News data models and curation result types
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union
import json


@dataclass
class NewsItem:
    """News item as produced by the data source"""
    title: str
    content: str
    source: str
    categories: List[str]  # Order kept for display
    relevance_score: float  # 0 = not relevant ... 1 = maximum relevance
    language: str  # e.g. "ptBR", "EN", "ES", "FR"
    summary: Optional[str] = None  # Set when Gemini produced a summary

    def to_dict(self) -> dict:
        """Convert to the camelCase layout used by the source file"""
        data = {
            "title": self.title,
            "content": self.content,
            "source": self.source,
            "categories": list(self.categories),
            "relevanceScore": self.relevance_score,
            "language": self.language,
        }
        if self.summary is not None:
            data["summary"] = self.summary
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "NewsItem":
        """Create a news item from a source-file dictionary"""
        return cls(
            title=data["title"],
            content=data["content"],
            source=data["source"],
            categories=list(data["categories"]),
            relevance_score=float(data["relevanceScore"]),
            language=data["language"],
            summary=data.get("summary"),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)


@dataclass
class SummaryMetadata:
    processing_time_ms: float
    original_length: int
    summary_length: int
    compression_ratio: float  # summary_length / original_length, 0 when original is empty


@dataclass
class SummaryResult:
    """Outcome of one summarization attempt"""
    summary: str
    original_item: NewsItem
    success: bool
    metadata: SummaryMetadata
    error: Optional[str] = None
    stage: str = "accepted"  # accepted | corrected | truncated | failed


@dataclass
class Approved:
    """Curation outcome for an accepted item (content may be replaced by a summary)"""
    item: NewsItem
    summary_result: Optional[SummaryResult] = None

    @property
    def summarized(self) -> bool:
        return self.summary_result is not None and self.summary_result.success


@dataclass
class Rejected:
    """Curation outcome for a refused item with every reason that applied"""
    item: NewsItem
    reasons: List[str]


CurationOutcome = Union[Approved, Rejected]


@dataclass
class RejectedNews:
    news: NewsItem
    reasons: List[str]


@dataclass
class CurationBatchReport:
    """
    Aggregated result of curating one batch

    total_processed always equals total_approved + total_rejected.
    """
    approved_items: List[NewsItem] = field(default_factory=list)
    rejected_items: List[RejectedNews] = field(default_factory=list)
    total_processed: int = 0
    total_approved: int = 0
    total_rejected: int = 0
    summaries_attempted: int = 0
    summaries_succeeded: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "approved_news": [item.to_dict() for item in self.approved_items],
            "rejected_news": [
                {"news": rejected.news.to_dict(), "reasons": list(rejected.reasons)}
                for rejected in self.rejected_items
            ],
            "total_processed": self.total_processed,
            "total_approved": self.total_approved,
            "total_rejected": self.total_rejected,
            "summaries_attempted": self.summaries_attempted,
            "summaries_succeeded": self.summaries_succeeded,
        }
