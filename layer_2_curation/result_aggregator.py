"""
Fold per-item curation outcomes into a batch report
"""
from typing import Iterable

from models.news import Approved, CurationBatchReport, CurationOutcome, Rejected, RejectedNews


class ResultAggregator:
    """Partition outcomes into approved and rejected, keeping input order"""

    @staticmethod
    def aggregate(outcomes: Iterable[CurationOutcome]) -> CurationBatchReport:
        report = CurationBatchReport()

        for outcome in outcomes:
            if isinstance(outcome, Approved):
                report.approved_items.append(outcome.item)
                if outcome.summary_result is not None:
                    report.summaries_attempted += 1
                    if outcome.summary_result.success:
                        report.summaries_succeeded += 1
            elif isinstance(outcome, Rejected):
                report.rejected_items.append(RejectedNews(news=outcome.item, reasons=list(outcome.reasons)))
            else:
                raise TypeError(f"Unknown curation outcome: {type(outcome).__name__}")

        report.total_approved = len(report.approved_items)
        report.total_rejected = len(report.rejected_items)
        report.total_processed = report.total_approved + report.total_rejected
        return report
