"""
Review Data Models

코드 리뷰 결과 및 파이프라인 실행 기록 데이터 모델들
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional
import uuid

from .pr_diff import ChangedFile, PullRequestContext
from ..errors import RemoteFetchFailure


FALLBACK_REVIEW_TEXT = (
    "Sorry, I could not review the code at this time. "
    "Please check that Ollama is running with: `ollama serve`"
)
EMPTY_REVIEW_TEXT = "No review generated"


@dataclass(frozen=True)
class ReviewResult:
    """리뷰 엔진 출력"""
    text: str
    succeeded: bool

    @classmethod
    def success(cls, text: Optional[str]) -> "ReviewResult":
        """생성된 텍스트로 성공 결과 생성 (비어 있으면 기본 문구)"""
        return cls(text=text or EMPTY_REVIEW_TEXT, succeeded=True)

    @classmethod
    def fallback(cls) -> "ReviewResult":
        """추론 서비스 실패 시 고정 안내 문구"""
        return cls(text=FALLBACK_REVIEW_TEXT, succeeded=False)


class PipelineState(Enum):
    """파이프라인 상태"""
    IDLE = "idle"
    COLLECTING = "collecting"
    BUILDING = "building"
    REVIEWING = "reviewing"
    PUBLISHING = "publishing"
    DONE = "done"


@dataclass
class PipelineRun:
    """파이프라인 1회 실행 기록"""
    context: PullRequestContext
    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    states: List[PipelineState] = field(default_factory=lambda: [PipelineState.IDLE])
    files: List[ChangedFile] = field(default_factory=list)
    prompt: Optional[str] = None
    result: Optional[ReviewResult] = None
    collect_failure: Optional[RemoteFetchFailure] = None
    publish_failure: Optional[RemoteFetchFailure] = None
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None

    @property
    def state(self) -> PipelineState:
        """현재 상태"""
        return self.states[-1]

    @property
    def is_done(self) -> bool:
        return self.state is PipelineState.DONE

    @property
    def published(self) -> bool:
        """코멘트 게시 성공 여부"""
        return self.is_done and self.publish_failure is None

    @property
    def processing_time(self) -> float:
        if self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()
