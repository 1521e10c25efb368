"""
Review Pipeline

Orchestrates one review run per opened pull request:
diff collection, prompt construction, LLM review and comment publication.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from pydantic import ValidationError

from .config import AppConfig
from .errors import FailureKind, RemoteFetchFailure
from .github.auth import GitHubAppAuth
from .github.client import GitHubClient
from .github.collector import DiffCollector
from .github.publisher import Publisher
from .llm.client import OllamaClient
from .llm.engine import ReviewEngine
from .llm.prompts import PromptBuilder
from .models.pr_diff import PullRequestContext, PullRequestEvent, ReviewRequest
from .models.review import PipelineRun, PipelineState


logger = logging.getLogger(__name__)

ClientFactory = Callable[[PullRequestContext], GitHubClient]


class ReviewPipeline:
    """
    Pipeline orchestrator.

    Runs Collecting -> Building -> Reviewing -> Publishing -> Done with no
    retries. A collection failure continues with no files, the review
    engine cannot fail, and a publication failure still ends in Done, so
    every run attempts exactly one comment.
    """

    def __init__(
        self,
        config: AppConfig,
        client_factory: ClientFactory,
        review_engine: Optional[ReviewEngine] = None,
        prompt_builder: Optional[PromptBuilder] = None,
    ):
        """
        Initialize review pipeline.

        Args:
            config: Application configuration
            client_factory: Builds a GitHub client authorised for a run's installation
            review_engine: Review engine (defaults to Ollama from config)
            prompt_builder: Prompt builder (defaults to config's patch cap)
        """
        self.config = config
        self.client_factory = client_factory
        self.review_engine = review_engine or ReviewEngine(
            OllamaClient(
                base_url=config.ollama.base_url,
                model=config.ollama.model,
                timeout=config.ollama.timeout_seconds,
            )
        )
        self.prompt_builder = prompt_builder or PromptBuilder(
            max_patch_chars=config.review.max_patch_chars
        )

    @classmethod
    def from_config(cls, config: AppConfig, auth: GitHubAppAuth) -> "ReviewPipeline":
        """Build a pipeline whose GitHub clients use App installation tokens."""
        def client_factory(context: PullRequestContext) -> GitHubClient:
            return GitHubClient(
                token_provider=auth.token_provider(context.installation_id),
                base_url=config.github.api_base_url,
                api_version=config.github.api_version,
                timeout=config.github.timeout_seconds,
                max_retries=config.github.max_retries,
            )
        return cls(config, client_factory)

    def handle_pull_request_opened(self, payload: dict) -> Optional[PipelineRun]:
        """
        Handle a ``pull_request.opened`` webhook payload.

        Returns:
            The completed PipelineRun, or None when the payload is invalid
        """
        try:
            event = PullRequestEvent.model_validate(payload)
            context = event.to_context()
        except (ValidationError, ValueError) as e:
            logger.error(f"Invalid pull_request payload, no review started: {e}")
            return None

        logger.info(f"Received a pull request event for #{context.pull_number}")
        return self.run(context, event.commit_message)

    def run(self, context: PullRequestContext, commit_message: Optional[str]) -> PipelineRun:
        """
        Run the pipeline for one pull request.

        Args:
            context: Pull request coordinates
            commit_message: PR description text

        Returns:
            PipelineRun record, always in state DONE
        """
        run = PipelineRun(context=context)
        logger.info(f"Starting review run {run.run_id} for {context.full_name}#{context.pull_number}")

        client = self.client_factory(context)
        collector = DiffCollector(client)
        publisher = Publisher(client)

        self._transition(run, PipelineState.COLLECTING)
        try:
            run.files = collector.collect(context)
        except RemoteFetchFailure as e:
            run.collect_failure = e
            self._log_collect_failure(context, e)
            run.files = []

        self._transition(run, PipelineState.BUILDING)
        request = ReviewRequest.create(run.files, commit_message)
        run.prompt = self.prompt_builder.build(request)
        logger.debug(
            f"Prompt built: {len(run.prompt)} chars, "
            f"{self.prompt_builder.count_file_sections(run.prompt)} file sections, "
            f"+{request.total_additions} -{request.total_deletions}"
        )

        self._transition(run, PipelineState.REVIEWING)
        run.result = self.review_engine.review(run.prompt)
        verdict = self.prompt_builder.verdict_of(run.result.text)
        if verdict:
            logger.info(f"Review verdict: {verdict}")

        self._transition(run, PipelineState.PUBLISHING)
        run.publish_failure = publisher.publish(context, run.result.text)

        self._transition(run, PipelineState.DONE)
        run.finished_at = datetime.now()
        logger.info(
            f"Review run {run.run_id} done ({run.processing_time:.2f}s, "
            f"files={len(run.files)}, reviewed={run.result.succeeded}, published={run.published})"
        )
        return run

    def _transition(self, run: PipelineRun, state: PipelineState) -> None:
        logger.debug(f"Run {run.run_id}: {run.state.value} -> {state.value}")
        run.states.append(state)

    def _log_collect_failure(self, context: PullRequestContext, failure: RemoteFetchFailure) -> None:
        if failure.kind is FailureKind.HTTP_STATUS:
            logger.error(
                f"Error getting PR files for {context.full_name}#{context.pull_number}! "
                f"{failure.describe()}"
            )
        else:
            logger.error(
                f"Could not reach GitHub for {context.full_name}#{context.pull_number}: "
                f"{failure.message}"
            )
        logger.warning("Continuing review with an empty file list")
