"""
Layer 2: Curation
- Curation Engine (acceptance rules, summary of long approved content)
- Result Aggregator (batch report with counts and rejection reasons)
"""
from .result_aggregator import ResultAggregator
from .curation_engine import CurationEngine, SUPPORTED_LANGUAGES

__all__ = [
    'CurationEngine',
    'ResultAggregator',
    'SUPPORTED_LANGUAGES',
]
