"""
Layer 3: Content Generation
- Summary Generator (Gemini summary bounded by SUMMARY_MAX_LENGTH, one
  corrective retry, hard truncation fallback)
"""
from .summary_generator import SummaryGenerator, SummaryStage, truncate_summary, TRUNCATION_SUFFIX

__all__ = [
    'SummaryGenerator',
    'SummaryStage',
    'truncate_summary',
    'TRUNCATION_SUFFIX',
]
