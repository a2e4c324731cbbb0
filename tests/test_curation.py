"""
Unit tests for Layer 2: Curation
Tests acceptance rules, summary triggering, result aggregation and ordering
"""
import sys
import os
import time
from unittest.mock import patch

import pytest

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import CurationConfig, Settings
from layer_2_curation.curation_engine import CurationEngine, SUPPORTED_LANGUAGES
from layer_2_curation.result_aggregator import ResultAggregator
from layer_3_content_generation.summary_generator import SummaryGenerator
from models.news import Approved, NewsItem, Rejected, SummaryMetadata, SummaryResult
from utils.errors import GenerationError
from utils.llm_client import StubLLMClient


def make_item(**overrides) -> NewsItem:
    data = dict(
        title="New battery chemistry announced",
        content="short",
        source="TechCrunch",
        categories=["Technology", "Energy"],
        relevance_score=0.9,
        language="EN",
    )
    data.update(overrides)
    return NewsItem(**data)


def make_engine(llm=None, **config) -> CurationEngine:
    cfg = CurationConfig(**config)
    generator = SummaryGenerator(llm, cfg) if llm is not None else None
    return CurationEngine(summary_generator=generator, config=cfg)


def title_responder(prompt: str) -> str:
    """Answer 'summary of <title>' for the title found in the prompt"""
    for line in prompt.splitlines():
        if line.startswith("Title: "):
            return "summary of " + line[len("Title: "):]
    return "summary"


class TestAcceptanceRules:
    """Test the score and language rules"""

    def test_low_score_rejected(self):
        """score 0.5 with threshold 0.7 gives exactly one reason"""
        engine = make_engine(relevance_threshold=0.7)
        outcome = engine.evaluate(make_item(relevance_score=0.5, language="EN"))

        assert isinstance(outcome, Rejected)
        assert outcome.reasons == ["insufficient score (0.5 < 0.7)"]

    def test_unsupported_language_rejected(self):
        engine = make_engine()
        outcome = engine.evaluate(make_item(relevance_score=0.8, language="FR"))

        assert isinstance(outcome, Rejected)
        assert outcome.reasons == ["unsupported language (FR)"]

    def test_both_reasons_accumulate(self):
        """Rules do not short-circuit; score reason comes first"""
        engine = make_engine()
        outcome = engine.evaluate(make_item(relevance_score=0.2, language="ES"))

        assert isinstance(outcome, Rejected)
        assert outcome.reasons == [
            "insufficient score (0.2 < 0.7)",
            "unsupported language (ES)",
        ]

    def test_score_equal_to_threshold_accepted(self):
        engine = make_engine(relevance_threshold=0.7)
        assert engine.evaluate_rules(make_item(relevance_score=0.7)) == []

    def test_custom_threshold(self):
        engine = make_engine(relevance_threshold=0.95)
        assert engine.evaluate_rules(make_item(relevance_score=0.9)) == ["insufficient score (0.9 < 0.95)"]

    @pytest.mark.parametrize("language", ["en", "ptbr", "PTBR", "pt-BR", "", "EN "])
    def test_language_match_is_case_sensitive_and_exact(self, language):
        engine = make_engine()
        assert engine.evaluate_rules(make_item(language=language)) == [f"unsupported language ({language})"]

    @pytest.mark.parametrize("language", list(SUPPORTED_LANGUAGES))
    def test_supported_languages_accepted(self, language):
        outcome = make_engine().evaluate(make_item(language=language))
        assert isinstance(outcome, Approved)

    def test_rejected_item_never_summarized(self):
        """Long content on a rejected item does not reach the generator"""
        llm = StubLLMClient(responses=["Summary"])
        engine = make_engine(llm)

        outcome = engine.evaluate(make_item(relevance_score=0.1, content="x" * 1000))

        assert isinstance(outcome, Rejected)
        assert llm.call_count == 0
        assert outcome.item.content == "x" * 1000


class TestSummaryTrigger:
    """Test when long content is summarized"""

    def test_short_content_unchanged_and_no_calls(self):
        llm = StubLLMClient(responses=["Summary"])
        engine = make_engine(llm)
        item = make_item(content="short")

        outcome = engine.evaluate(item)

        assert isinstance(outcome, Approved)
        assert outcome.item.content == "short"
        assert outcome.item.summary is None
        assert outcome.summary_result is None
        assert llm.call_count == 0

    def test_content_at_trigger_not_summarized(self):
        llm = StubLLMClient(responses=["Summary"])
        engine = make_engine(llm, content_length_trigger=300)

        outcome = engine.evaluate(make_item(content="x" * 300))

        assert outcome.item.content == "x" * 300
        assert llm.call_count == 0

    def test_content_over_trigger_summarized(self):
        llm = StubLLMClient(responses=["Summary"])
        engine = make_engine(llm, content_length_trigger=300)

        outcome = engine.evaluate(make_item(content="x" * 301))

        assert outcome.item.content == "Summary"
        assert llm.call_count == 1

    def test_summary_replaces_content(self):
        """ptBR item with 500 chars and a 133 character answer"""
        answer = "s" * 133
        llm = StubLLMClient(responses=[answer])
        engine = make_engine(llm)
        item = make_item(language="ptBR", content="c" * 500)

        outcome = engine.evaluate(item)

        assert isinstance(outcome, Approved)
        assert outcome.item.content == answer
        assert outcome.item.summary == answer
        assert outcome.summary_result.metadata.summary_length == 133
        assert outcome.summarized is True
        # Other fields untouched
        assert outcome.item.title == item.title
        assert outcome.item.categories == item.categories
        assert outcome.item.relevance_score == item.relevance_score
        assert outcome.item.language == "ptBR"
        # Input item is not mutated
        assert item.content == "c" * 500
        assert item.summary is None

    def test_generator_failure_keeps_original_content(self):
        """An always failing generator still approves the item"""
        llm = StubLLMClient(responses=[GenerationError("Gemini API error: unavailable")])
        engine = make_engine(llm)

        outcome = engine.evaluate(make_item(content="c" * 500))

        assert isinstance(outcome, Approved)
        assert outcome.item.content == "c" * 500
        assert outcome.item.summary is None
        assert outcome.summarized is False
        assert outcome.summary_result.error == "Gemini API error: unavailable"

    def test_blank_summary_keeps_original_content(self):
        content = "y" * 400
        engine = make_engine(StubLLMClient(responses=["  \n "]))

        outcome = engine.evaluate(make_item(content=content))

        assert isinstance(outcome, Approved)
        assert outcome.item.content == content
        assert outcome.item.summary is None
        assert outcome.summary_result.success is False

    def test_no_generator_means_no_summary(self):
        engine = make_engine(llm=None)
        outcome = engine.evaluate(make_item(content="c" * 1000))

        assert isinstance(outcome, Approved)
        assert outcome.item.content == "c" * 1000


class TestCurateBatch:
    """Test whole-batch curation"""

    def test_empty_batch(self):
        report = make_engine().curate([])

        assert report.total_processed == 0
        assert report.total_approved == 0
        assert report.total_rejected == 0
        assert report.approved_items == []
        assert report.rejected_items == []

    def test_mixed_batch_keeps_order_and_counts(self):
        llm = StubLLMClient(responder=title_responder)
        engine = make_engine(llm)
        items = [
            make_item(title="A", relevance_score=0.9),
            make_item(title="B", relevance_score=0.3),
            make_item(title="C", content="x" * 400),
            make_item(title="D", language="DE"),
            make_item(title="E", language="ptBR"),
        ]

        report = engine.curate(items)

        assert [i.title for i in report.approved_items] == ["A", "C", "E"]
        assert [r.news.title for r in report.rejected_items] == ["B", "D"]
        assert report.rejected_items[0].reasons == ["insufficient score (0.3 < 0.7)"]
        assert report.rejected_items[1].reasons == ["unsupported language (DE)"]
        assert report.approved_items[1].content == "summary of C"
        assert report.total_processed == 5
        assert report.total_processed == report.total_approved + report.total_rejected
        assert report.summaries_attempted == 1
        assert report.summaries_succeeded == 1

    def test_curation_is_idempotent(self):
        """Same input and deterministic generator give the same report"""
        items = [
            make_item(title="A", content="x" * 500),
            make_item(title="B", relevance_score=0.1, language="FR"),
            make_item(title="C"),
        ]

        first = make_engine(StubLLMClient(responder=title_responder)).curate(items)
        second = make_engine(StubLLMClient(responder=title_responder)).curate(items)

        assert first.to_dict() == second.to_dict()
        assert items[0].content == "x" * 500

    def test_sequential_mode_waits_between_summaries(self):
        llm = StubLLMClient(responder=title_responder)
        engine = make_engine(llm, request_delay=0.5)
        items = [make_item(title=f"N{i}", content="x" * 400) for i in range(3)]

        with patch('layer_3_content_generation.summary_generator.time.sleep') as mock_sleep:
            engine.curate(items)

        assert mock_sleep.call_count == 2
        mock_sleep.assert_called_with(0.5)
        assert llm.call_count == 3

    def test_worker_pool_preserves_input_order(self):
        """Slow early items finish last but keep their position"""
        completed = []

        def slow_responder(prompt):
            answer = title_responder(prompt)
            if answer.endswith("N0"):
                time.sleep(0.2)
            completed.append(answer[len("summary of "):])
            return answer

        llm = StubLLMClient(responder=slow_responder)
        engine = make_engine(llm, max_workers=4)
        items = [make_item(title=f"N{i}", content="x" * 400) for i in range(6)]

        report = engine.curate(items)

        assert completed[0] != "N0"
        assert completed[-1] == "N0"
        assert [i.title for i in report.approved_items] == [f"N{i}" for i in range(6)]
        assert [i.content for i in report.approved_items] == [f"summary of N{i}" for i in range(6)]
        assert llm.call_count == 6

    def test_worker_pool_isolates_failures(self):
        def flaky_responder(prompt):
            if "Title: N2" in prompt:
                return GenerationError("timeout")
            return title_responder(prompt)

        engine = make_engine(StubLLMClient(responder=flaky_responder), max_workers=3)
        items = [make_item(title=f"N{i}", content="x" * 400) for i in range(4)]

        report = engine.curate(items)

        assert report.total_approved == 4
        assert report.approved_items[2].content == "x" * 400
        assert report.approved_items[3].content == "summary of N3"
        assert report.summaries_attempted == 4
        assert report.summaries_succeeded == 3


class TestResultAggregator:
    """Test the pure fold into a batch report"""

    def test_partitions_in_order(self):
        a, b, c, d = (make_item(title=t) for t in "ABCD")
        outcomes = [Approved(a), Rejected(b, ["r1"]), Approved(c), Rejected(d, ["r2", "r3"])]

        report = ResultAggregator.aggregate(outcomes)

        assert report.approved_items == [a, c]
        assert [r.news for r in report.rejected_items] == [b, d]
        assert report.rejected_items[1].reasons == ["r2", "r3"]
        assert report.total_processed == 4
        assert report.total_approved == 2
        assert report.total_rejected == 2

    def test_counts_summary_attempts(self):
        item = make_item()
        ok = SummaryResult("s", item, True, SummaryMetadata(1.0, 5, 1, 0.2))
        failed = SummaryResult("", item, False, SummaryMetadata(1.0, 5, 0, 0), error="x")

        report = ResultAggregator.aggregate([Approved(item, ok), Approved(item, failed), Approved(item)])

        assert report.summaries_attempted == 2
        assert report.summaries_succeeded == 1

    def test_accepts_generator(self):
        report = ResultAggregator.aggregate(Approved(make_item(title=str(i))) for i in range(3))
        assert report.total_processed == 3
        assert len(report.approved_items) == 3

    def test_report_to_dict(self):
        report = ResultAggregator.aggregate([Rejected(make_item(language="FR"), ["unsupported language (FR)"])])
        data = report.to_dict()

        assert data["total_rejected"] == 1
        assert data["rejected_news"][0]["reasons"] == ["unsupported language (FR)"]
        assert data["rejected_news"][0]["news"]["relevanceScore"] == 0.9


class TestCurationConfig:
    """Test the configuration value object"""

    def test_defaults(self):
        config = CurationConfig()
        assert config.relevance_threshold == 0.7
        assert config.summary_max_length == 180
        assert config.content_length_trigger == 300
        assert config.max_workers == 1

    @pytest.mark.parametrize("kwargs", [
        {"relevance_threshold": 1.5},
        {"relevance_threshold": -0.1},
        {"summary_max_length": 3},
        {"content_length_trigger": -1},
        {"max_workers": 0},
        {"request_delay": -1},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            CurationConfig(**kwargs)

    def test_from_settings(self):
        class FakeSettings(Settings):
            RELEVANCE_SCORE_THRESHOLD = 0.5
            SUMMARY_MAX_LENGTH = 200
            SUMMARY_TRIGGER_LENGTH = 200
            SUMMARY_MAX_WORKERS = 2
            LLM_REQUEST_DELAY = 0.0

        config = CurationConfig.from_settings(FakeSettings())

        assert config == CurationConfig(
            relevance_threshold=0.5,
            summary_max_length=200,
            content_length_trigger=200,
            max_workers=2,
            request_delay=0.0,
        )
