"""
PR Diff Data Models

Pull Request 변경 파일 및 리뷰 요청 관련 데이터 모델들
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple
from pydantic import BaseModel, field_validator


VALID_STATUSES = {'added', 'modified', 'removed', 'renamed'}

# GitHub 상태 값 중 위 네 가지에 속하지 않는 값의 정규화 매핑
STATUS_ALIASES = {
    'copied': 'added',
    'changed': 'modified',
    'unchanged': 'modified',
}


@dataclass(frozen=True)
class ChangedFile:
    """PR에서 변경된 개별 파일"""
    filename: str
    status: str  # 'added', 'modified', 'removed', 'renamed'
    additions: int
    deletions: int
    patch: Optional[str] = None

    def __post_init__(self):
        """데이터 검증"""
        if not self.filename:
            raise ValueError("Filename cannot be empty")
        if self.status not in VALID_STATUSES:
            raise ValueError(f"Invalid status: {self.status}")
        if self.additions < 0 or self.deletions < 0:
            raise ValueError("Addition and deletion counts must be non-negative")

    @property
    def has_patch(self) -> bool:
        """diff 텍스트 존재 여부"""
        return bool(self.patch)

    @classmethod
    def from_api(cls, file_data: dict) -> "ChangedFile":
        """GitHub API 응답 항목에서 생성"""
        status = file_data.get('status', 'modified')
        return cls(
            filename=file_data['filename'],
            status=STATUS_ALIASES.get(status, status if status in VALID_STATUSES else 'modified'),
            additions=int(file_data.get('additions') or 0),
            deletions=int(file_data.get('deletions') or 0),
            patch=file_data.get('patch') or None,
        )


@dataclass(frozen=True)
class PullRequestContext:
    """파이프라인 실행 동안 읽기 전용인 PR 좌표"""
    owner: str
    repo: str
    pull_number: int
    issue_number: int
    installation_id: Optional[int] = None

    def __post_init__(self):
        """데이터 검증"""
        if not self.owner or not self.repo:
            raise ValueError("Owner and repo must be non-empty")
        if self.pull_number <= 0 or self.issue_number <= 0:
            raise ValueError("PR and issue numbers must be positive")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class ReviewRequest:
    """프롬프트 생성 입력"""
    files: Tuple[ChangedFile, ...]
    commit_message: str

    @classmethod
    def create(cls, files: List[ChangedFile], commit_message: Optional[str]) -> "ReviewRequest":
        """수집된 파일과 PR 본문으로 요청 생성"""
        return cls(files=tuple(files), commit_message=commit_message or "")

    @property
    def total_additions(self) -> int:
        return sum(f.additions for f in self.files)

    @property
    def total_deletions(self) -> int:
        return sum(f.deletions for f in self.files)


# Pydantic models for webhook payload validation
class RepositoryOwner(BaseModel):
    """웹훅 페이로드의 저장소 소유자"""
    login: str


class Repository(BaseModel):
    """웹훅 페이로드의 저장소"""
    name: str
    owner: RepositoryOwner

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Repository name cannot be empty')
        return v


class PullRequest(BaseModel):
    """웹훅 페이로드의 Pull Request"""
    number: int
    body: Optional[str] = None

    @field_validator('number')
    @classmethod
    def validate_number(cls, v):
        if v <= 0:
            raise ValueError('PR number must be positive')
        return v


class Installation(BaseModel):
    """GitHub App 설치 정보"""
    id: int


class PullRequestEvent(BaseModel):
    """pull_request 웹훅 이벤트 중 파이프라인이 읽는 부분"""
    action: str
    pull_request: PullRequest
    repository: Repository
    installation: Optional[Installation] = None

    def to_context(self) -> PullRequestContext:
        """파이프라인 컨텍스트로 변환"""
        return PullRequestContext(
            owner=self.repository.owner.login,
            repo=self.repository.name,
            pull_number=self.pull_request.number,
            issue_number=self.pull_request.number,
            installation_id=self.installation.id if self.installation else None,
        )

    @property
    def commit_message(self) -> str:
        return self.pull_request.body or ""
