"""
News curation: accept or reject each item and summarize long approved content

Acceptance rules (both are always checked, reasons accumulate):
- relevance score must be >= the configured threshold (default 0.7)
- language must be exactly "ptBR" or "EN"

Approved items whose content is longer than the trigger length get their
content replaced by a Gemini summary. A failed summary keeps the original
content; it never turns an approved item into a rejected one.
"""
import concurrent.futures as _fut
import dataclasses
from typing import List, Optional, Sequence

from config.settings import CurationConfig
from layer_2_curation.result_aggregator import ResultAggregator
from layer_3_content_generation.summary_generator import SummaryGenerator
from models.news import Approved, CurationBatchReport, CurationOutcome, NewsItem, Rejected, SummaryResult
from utils.logger import get_logger

logger = get_logger(__name__)

SUPPORTED_LANGUAGES = ("ptBR", "EN")


class CurationEngine:
    """Apply the curation rules to a batch of news items"""

    def __init__(self, summary_generator: Optional[SummaryGenerator] = None,
                 config: Optional[CurationConfig] = None):
        """
        Initialize the engine

        Args:
            summary_generator: Generator used for long content; None disables summarization
            config: Curation configuration (defaults to CurationConfig())
        """
        self.summary_generator = summary_generator
        self.config = config or CurationConfig()

    def evaluate_rules(self, item: NewsItem) -> List[str]:
        """
        Check an item against the acceptance rules

        Returns:
            Rejection reasons, empty when the item is accepted
        """
        reasons = []

        threshold = self.config.relevance_threshold
        if item.relevance_score < threshold:
            reasons.append(f"insufficient score ({item.relevance_score} < {threshold})")

        if item.language not in SUPPORTED_LANGUAGES:
            reasons.append(f"unsupported language ({item.language})")

        return reasons

    def needs_summary(self, item: NewsItem) -> bool:
        return self.summary_generator is not None and len(item.content) > self.config.content_length_trigger

    def evaluate(self, item: NewsItem) -> CurationOutcome:
        """Curate a single item, summarizing it when needed"""
        reasons = self.evaluate_rules(item)
        if reasons:
            return self._reject(item, reasons)

        if not self.needs_summary(item):
            return self._approve(item)

        return self._approve(item, self.summary_generator.summarize(item))

    def curate(self, items: Sequence[NewsItem]) -> CurationBatchReport:
        """
        Curate a whole batch

        Outcomes keep the input order whether summaries run sequentially or
        on the worker pool.
        """
        logger.info(f"Starting curation of {len(items)} news items...")

        # Rule evaluation has no I/O and always runs in order on this thread
        verdicts = [(item, self.evaluate_rules(item)) for item in items]
        pending = [idx for idx, (item, reasons) in enumerate(verdicts)
                   if not reasons and self.needs_summary(item)]

        summaries = {}
        if pending:
            results = self._summarize_all([verdicts[idx][0] for idx in pending])
            summaries = dict(zip(pending, results))

        outcomes: List[CurationOutcome] = []
        for idx, (item, reasons) in enumerate(verdicts):
            if reasons:
                outcomes.append(self._reject(item, reasons))
            else:
                outcomes.append(self._approve(item, summaries.get(idx)))

        report = ResultAggregator.aggregate(outcomes)
        logger.info(f"Curation finished: {report.total_approved} approved, {report.total_rejected} rejected")
        return report

    def _summarize_all(self, items: List[NewsItem]) -> List[SummaryResult]:
        max_workers = min(self.config.max_workers, len(items))
        if max_workers == 1:
            return self.summary_generator.summarize_batch(items)

        logger.info(f"Summarizing {len(items)} news items with {max_workers} workers")
        with _fut.ThreadPoolExecutor(max_workers=max_workers) as ex:
            futures = [ex.submit(self.summary_generator.summarize, item) for item in items]
            return [fu.result() for fu in futures]

    def _approve(self, item: NewsItem, summary_result: Optional[SummaryResult] = None) -> Approved:
        if summary_result is not None and summary_result.success:
            item = dataclasses.replace(item, content=summary_result.summary, summary=summary_result.summary)
        logger.info(f"Approved: \"{item.title}\" (Score: {item.relevance_score}, Lang: {item.language})")
        return Approved(item=item, summary_result=summary_result)

    def _reject(self, item: NewsItem, reasons: List[str]) -> Rejected:
        logger.info(f"Rejected: \"{item.title}\" - {', '.join(reasons)}")
        return Rejected(item=item, reasons=reasons)
