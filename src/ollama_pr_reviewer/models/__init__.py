"""
Data Models

Ollama PR Reviewer 파이프라인의 핵심 데이터 모델들
"""

from .pr_diff import ChangedFile, PullRequestContext, ReviewRequest, PullRequestEvent
from .review import (
    ReviewResult,
    PipelineState,
    PipelineRun,
    FALLBACK_REVIEW_TEXT,
    EMPTY_REVIEW_TEXT,
)

__all__ = [
    "ChangedFile",
    "PullRequestContext",
    "ReviewRequest",
    "PullRequestEvent",
    "ReviewResult",
    "PipelineState",
    "PipelineRun",
    "FALLBACK_REVIEW_TEXT",
    "EMPTY_REVIEW_TEXT",
]
