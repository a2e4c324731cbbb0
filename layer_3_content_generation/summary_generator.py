"""
News summary generation with Gemini

Writes a summary of at most `summary_max_length` characters for a news item.
The length bound is enforced in stages:

    DRAFT -> CORRECTIVE_RETRY -> ACCEPTED | TRUNCATED

A draft that fits is accepted. An oversized draft gets exactly one
corrective "shorten it" call; if that still does not fit (or fails), the
first draft is hard-truncated. Only a failure of the draft call itself
produces an unsuccessful result.
"""
import time
from enum import Enum
from typing import List, Optional

from config.settings import CurationConfig
from models.news import NewsItem, SummaryMetadata, SummaryResult
from utils.logger import get_logger

logger = get_logger(__name__)

TRUNCATION_SUFFIX = "..."


class SummaryStage(str, Enum):
    DRAFT = "draft"
    CORRECTIVE_RETRY = "corrective_retry"
    ACCEPTED = "accepted"
    CORRECTED = "corrected"
    TRUNCATED = "truncated"
    FAILED = "failed"


class SummaryGenerator:
    """Generate length-bounded news summaries through an injected LLM client"""

    def __init__(self, llm_client, config: Optional[CurationConfig] = None):
        """
        Args:
            llm_client: Anything exposing generate_content(prompt) -> str
            config: Curation configuration (summary_max_length, request_delay)
        """
        self.llm_client = llm_client
        self.config = config or CurationConfig()

    @property
    def max_length(self) -> int:
        return self.config.summary_max_length

    def summarize(self, item: NewsItem) -> SummaryResult:
        """
        Generate a summary for one news item

        Never raises: a failed draft call is reported through
        SummaryResult.success / SummaryResult.error.
        """
        start = time.monotonic()
        logger.info(f"Generating summary for: \"{item.title}\"")

        stage = SummaryStage.DRAFT
        draft = ""
        summary = ""

        while stage not in (SummaryStage.ACCEPTED, SummaryStage.CORRECTED, SummaryStage.TRUNCATED):
            if stage is SummaryStage.DRAFT:
                try:
                    draft = self.llm_client.generate_content(self._build_summary_prompt(item)).strip()
                except Exception as e:
                    logger.error(f"Error generating summary for \"{item.title}\": {e}")
                    return self._failed_result(item, str(e), start)

                if not draft:
                    logger.error(f"Empty summary returned for \"{item.title}\"")
                    return self._failed_result(item, "Empty summary returned by the model", start)

                if len(draft) <= self.max_length:
                    summary = draft
                    stage = SummaryStage.ACCEPTED
                else:
                    logger.warning(f"Summary too long ({len(draft)} characters), trying to shorten it...")
                    stage = SummaryStage.CORRECTIVE_RETRY

            elif stage is SummaryStage.CORRECTIVE_RETRY:
                shorter = self._request_shorter_summary(item, draft)
                if shorter and len(shorter) <= self.max_length:
                    summary = shorter
                    stage = SummaryStage.CORRECTED
                else:
                    summary = truncate_summary(draft, self.max_length)
                    stage = SummaryStage.TRUNCATED

        return self._create_result(item, summary, stage, start)

    def summarize_batch(self, items: List[NewsItem]) -> List[SummaryResult]:
        """
        Summarize several items one after another

        Waits `request_delay` seconds between calls to stay under the API rate limit.
        """
        logger.info(f"Generating summaries for {len(items)} news items...")
        results = []
        for idx, item in enumerate(items):
            results.append(self.summarize(item))
            if idx < len(items) - 1 and self.config.request_delay > 0:
                time.sleep(self.config.request_delay)

        success_count = len([r for r in results if r.success])
        logger.info(f"{success_count}/{len(items)} summaries generated successfully")
        return results

    def _request_shorter_summary(self, item: NewsItem, oversized: str) -> Optional[str]:
        """Single corrective call; returns None when the call fails"""
        try:
            return self.llm_client.generate_content(self._build_shorten_prompt(item, oversized)).strip()
        except Exception as e:
            logger.warning(f"Error shortening summary for \"{item.title}\", using truncated version: {e}")
            return None

    def _build_summary_prompt(self, item: NewsItem) -> str:
        """
        Build the summarization prompt

        Args:
            item: News item to summarize

        Returns:
            Prompt string
        """
        max_length = self.max_length
        prompt = f"""You are an expert in writing concise, impactful news summaries.

TASK: Write a summary of the news below in AT MOST {max_length} characters.

IMPORTANT RULES:
- Use clear and objective language
- Keep the most relevant information
- Do not use quotes or special markup
- Focus on the main facts
- Keep a journalistic tone
- Write in the same language as the news

NEWS:
Title: {item.title}
Content: {item.content}

SUMMARY (at most {max_length} characters):"""

        return prompt

    def _build_shorten_prompt(self, item: NewsItem, oversized: str) -> str:
        max_length = self.max_length
        return f"""You received this summary but it is too long. Shorten it to AT MOST {max_length} characters while keeping the essential information:

ORIGINAL SUMMARY: {oversized}

NEWS TITLE: {item.title}

SHORTENED SUMMARY (at most {max_length} characters):"""

    def _create_result(self, item: NewsItem, summary: str, stage: SummaryStage, start: float) -> SummaryResult:
        processing_time_ms = (time.monotonic() - start) * 1000
        original_length = len(item.content)
        summary_length = len(summary)

        logger.info(
            f"Summary generated in {processing_time_ms:.0f}ms "
            f"({original_length} -> {summary_length} characters, {stage.value})"
        )

        return SummaryResult(
            summary=summary,
            original_item=item,
            success=True,
            stage=stage.value,
            metadata=SummaryMetadata(
                processing_time_ms=processing_time_ms,
                original_length=original_length,
                summary_length=summary_length,
                compression_ratio=summary_length / original_length if original_length > 0 else 0,
            ),
        )

    def _failed_result(self, item: NewsItem, error: str, start: float) -> SummaryResult:
        return SummaryResult(
            summary="",
            original_item=item,
            success=False,
            error=error,
            stage=SummaryStage.FAILED.value,
            metadata=SummaryMetadata(
                processing_time_ms=(time.monotonic() - start) * 1000,
                original_length=len(item.content),
                summary_length=0,
                compression_ratio=0,
            ),
        )


def truncate_summary(text: str, max_length: int) -> str:
    """Cut text to max_length characters, the last three being '...'"""
    return text[:max_length - len(TRUNCATION_SUFFIX)] + TRUNCATION_SUFFIX
