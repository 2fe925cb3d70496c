"""
Journal module for daily lifelog summarization.

This module provides functionality for:
- Action item extraction from lifelog markdown
- Heuristic and LLM-powered daily summaries
"""

from src.journal.action_items import extract_action_items
from src.journal.models import DailySummary, SummaryOutcome, SummaryStatus
from src.journal.summarizer import DailySummarizer

__all__ = [
    "DailySummarizer",
    "DailySummary",
    "SummaryOutcome",
    "SummaryStatus",
    "extract_action_items",
]
