"""
Prompt Builder

Builds the review prompt sent to the inference endpoint from the
collected file diffs and the pull request description.
"""

import logging
from typing import List, Optional

from ..models.pr_diff import ChangedFile, ReviewRequest


logger = logging.getLogger(__name__)


REVIEW_CATEGORIES = [
    "Code Quality & Best Practices",
    "Potential Bugs or Issues",
    "Security Concerns",
    "Performance Improvements",
    "Style & Readability",
]

SHIP_VERDICT = "Good to Ship 🚀"
FIX_VERDICT = "Needs Fix 🛠️"
NO_DIFF_MARKER = "No diff available"


class PromptBuilder:
    """
    Builds review prompts.

    The output depends only on the ReviewRequest and the patch cap, so
    identical requests always render byte-identical prompts.
    """

    def __init__(self, max_patch_chars: Optional[int] = 60000):
        """
        Initialize prompt builder.

        Args:
            max_patch_chars: Per-file patch character cap (0 or None disables)
        """
        self.max_patch_chars = max_patch_chars or None
        self.template = self._load_template()

    def build(self, request: ReviewRequest) -> str:
        """
        Build complete review prompt.

        Args:
            request: ReviewRequest with files and commit message

        Returns:
            Complete prompt string
        """
        logger.debug(f"Building review prompt for {len(request.files)} files")

        sections = [
            self.template["system_prompt"],
            self.template["verdict_instructions"],
            f"Commit message: {request.commit_message}",
            self.template["file_changes_header"],
        ]
        sections.extend(self._format_file(f) for f in request.files)

        return "\n\n".join(sections) + "\n"

    def _format_file(self, changed_file: ChangedFile) -> str:
        """Format one file section for prompt inclusion."""
        formatted = [
            f"## File: {changed_file.filename} ({changed_file.status})",
            f"Changes: +{changed_file.additions} -{changed_file.deletions}",
            "",
            self._format_patch(changed_file.patch),
        ]
        return "\n".join(formatted)

    def _format_patch(self, patch: Optional[str]) -> str:
        if not patch:
            return NO_DIFF_MARKER

        if self.max_patch_chars and len(patch) > self.max_patch_chars:
            omitted = len(patch) - self.max_patch_chars
            return f"{patch[:self.max_patch_chars]}\n... [patch truncated: {omitted} more characters]"

        return patch

    def _load_template(self) -> dict:
        """Load fixed prompt sections."""
        categories = "\n".join(f"- {c}" for c in REVIEW_CATEGORIES)
        return {
            "system_prompt": (
                "You are a code reviewer posting your comments to GitHub.\n"
                "Provide a very concise review **only for the files affected**.\n"
                "Split your feedback into these categories:\n"
                f"{categories}"
            ),
            "verdict_instructions": (
                f'The final line of your review must read exactly "{SHIP_VERDICT}" '
                "if and only if there are no issues or alterations suggested in any category.\n"
                f'The final line of your review must read exactly "{FIX_VERDICT}" '
                "if there are considerable issues in any of the categories, "
                'especially "Security Concerns" or "Potential Bugs or Issues".'
            ),
            "file_changes_header": "File changes:",
        }

    @staticmethod
    def count_file_sections(prompt: str) -> int:
        """
        Number of header-shaped lines in a built prompt.

        Patches are rendered verbatim, so a patch or description line that
        itself starts with ``## File: `` is counted too. Used for log
        diagnostics only.
        """
        return sum(1 for line in prompt.split("\n") if line.startswith("## File: "))

    @staticmethod
    def verdict_of(review_text: str) -> Optional[str]:
        """Return the verdict on the last non-empty line of a review, if any."""
        lines: List[str] = [line.strip() for line in review_text.strip().split("\n") if line.strip()]
        if not lines:
            return None
        last = lines[-1]
        for verdict in (SHIP_VERDICT, FIX_VERDICT):
            if last.endswith(verdict):
                return verdict
        return None
