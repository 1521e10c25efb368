"""
Ollama PR Reviewer

GitHub App 웹훅으로 새 Pull Request를 받아 로컬 Ollama 모델로 코드 리뷰를 생성하고
PR 코멘트로 게시하는 백엔드
"""

__version__ = "1.0.0"

from .pipeline import ReviewPipeline

__all__ = ["ReviewPipeline", "__version__"]
