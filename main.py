"""
Main entry point for the application

This file runs the whole curation pipeline for one batch of news:
1. Connect to the database
2. Load news from the JSON source file
3. Curate them (score/language rules, Gemini summaries for long content)
4. Save the approved news with their categories
5. Print the final report

Flags:
    --dry-run       use a scripted summarizer and skip the database
    --no-summary    do not summarize long content
    --source PATH   read news from PATH instead of NEWS_SOURCE_FILE
"""
import dataclasses
import sys
from typing import List, Optional

from config.settings import settings, CurationConfig
from layer_1_data_import.news_source import JsonNewsSource
from layer_1_data_import.load_news import load_news_from_source, LoadNewsResult
from layer_2_curation.curation_engine import CurationEngine
from layer_3_content_generation.summary_generator import SummaryGenerator
from layer_4_persistence.news_repository import NewsRepository
from layer_4_persistence.persist_news import persist_approved_news, PersistResult
from models.news import CurationBatchReport
from utils.llm_client import LLMClient, StubLLMClient
from utils.logger import get_logger

logger = get_logger(__name__)


def _dry_run_responder(prompt: str) -> str:
    """Scripted 'summary' for dry runs: the news title found in the prompt"""
    for line in prompt.splitlines():
        if line.startswith("Title: ") or line.startswith("NEWS TITLE: "):
            return line.split(": ", 1)[1]
    return prompt[:80]


def format_bytes(size: int) -> str:
    """Format a byte count for humans (e.g. 1536 -> '1.5 KB')"""
    if size <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size)
    idx = 0
    while value >= 1024 and idx < len(units) - 1:
        value /= 1024
        idx += 1
    return f"{round(value, 2):g} {units[idx]}"


def build_engine(dry_run: bool = False, summarize: bool = True) -> CurationEngine:
    """Wire the curation engine with its summary generator"""
    config = CurationConfig.from_settings()
    if not summarize:
        return CurationEngine(summary_generator=None, config=config)

    if dry_run:
        llm_client = StubLLMClient(responder=_dry_run_responder)
        config = dataclasses.replace(config, request_delay=0.0)
    else:
        llm_client = LLMClient()
        if not llm_client.test_connection():
            logger.warning("Gemini connection check failed; long news may keep their original content")
    return CurationEngine(summary_generator=SummaryGenerator(llm_client, config), config=config)


def log_report(load_result: LoadNewsResult, report: CurationBatchReport,
               persist_result: Optional[PersistResult]):
    """Log the final report for the operator"""
    logger.info("\n" + "=" * 60)
    logger.info("Final Report")
    logger.info("=" * 60)
    if load_result.source_info:
        logger.info(f"File processed: {load_result.source_info.location}")
        logger.info(f"File size: {format_bytes(load_result.source_info.size or 0)}")
    logger.info(f"Load time: {load_result.execution_time_ms:.0f}ms")
    logger.info(f"Total loaded: {load_result.total_loaded}")
    logger.info(f"Processed: {report.total_processed}")
    logger.info(f"Approved: {report.total_approved}")
    logger.info(f"Rejected: {report.total_rejected}")
    for rejected in report.rejected_items:
        logger.info(f"  - \"{rejected.news.title}\": {', '.join(rejected.reasons)}")
    logger.info(f"Summaries generated: {report.summaries_succeeded}/{report.summaries_attempted}")
    if persist_result is not None:
        logger.info(f"Inserted successfully: {persist_result.success_count}")
        if persist_result.failure_count > 0:
            logger.info(f"Insert failures: {persist_result.failure_count}")


def log_database_stats(repository: NewsRepository):
    """Log how many news and categories the database now holds"""
    all_news = repository.get_all_news()
    all_categories = repository.get_all_categories()

    logger.info("\n" + "=" * 60)
    logger.info("Database Statistics")
    logger.info("=" * 60)
    logger.info(f"Total news in database: {len(all_news)}")
    logger.info(f"Total categories: {len(all_categories)}")
    if all_categories:
        logger.info(f"Available categories: {', '.join(c.name for c in all_categories)}")
    if all_news:
        logger.info("Latest news in database:")
        for idx, record in enumerate(all_news[:3], 1):
            logger.info(f"{idx}. {record.title}")
            logger.info(f"   {record.published_at}")
            logger.info(f"   {', '.join(c.name for c in record.categories)}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the complete workflow

    Returns:
        0 on success, 1 on a fatal error
    """
    argv = sys.argv[1:] if argv is None else argv
    dry_run = "--dry-run" in argv
    summarize = "--no-summary" not in argv
    source_path = settings.NEWS_SOURCE_FILE
    if "--source" in argv:
        idx = argv.index("--source")
        if idx + 1 >= len(argv):
            logger.error("--source needs a file path")
            return 1
        source_path = argv[idx + 1]

    repository = None
    try:
        logger.info("=" * 60)
        logger.info("News Curation Pipeline - Starting")
        logger.info("=" * 60)
        settings.ensure_directories()

        # ============================================================
        # STEP 1: Connect to the database
        # ============================================================
        if not dry_run:
            logger.info("STEP 1: Connecting to the database...")
            repository = NewsRepository()
            if not repository.test_connection():
                logger.error("Database connection failed")
                return 1

        # ============================================================
        # STEP 2: Load news from the source file
        # ============================================================
        logger.info(f"STEP 2: Loading news from {source_path}...")
        load_result = load_news_from_source(JsonNewsSource(source_path))
        for error in load_result.errors:
            logger.warning(f"Load error: {error}")
        if not load_result.news:
            logger.warning("No news was loaded from the source")
            return 0

        # ============================================================
        # STEP 3: Curate (rules + summaries)
        # ============================================================
        logger.info("STEP 3: Curating news...")
        engine = build_engine(dry_run=dry_run, summarize=summarize)
        report = engine.curate(load_result.news)

        # ============================================================
        # STEP 4: Save approved news
        # ============================================================
        persist_result = None
        if repository is not None:
            logger.info("STEP 4: Saving approved news...")
            persist_result = persist_approved_news(
                repository, report.approved_items, delay=settings.DB_INSERT_DELAY
            )

        log_report(load_result, report, persist_result)
        if repository is not None:
            log_database_stats(repository)

        logger.info("Processing finished")
        return 0

    except Exception as e:
        logger.error(f"Error in main workflow: {e}", exc_info=True)
        return 1
    finally:
        if repository is not None:
            repository.close()


if __name__ == "__main__":
    sys.exit(main())
