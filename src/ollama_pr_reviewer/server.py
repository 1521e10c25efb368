"""
Webhook Server

Flask application receiving GitHub App webhook deliveries. Verified
deliveries are acknowledged immediately and processed on a background
thread, so a slow inference call never holds the delivery connection open.
"""

import logging
import sys
import threading
from typing import Callable, Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, request

from . import __version__
from .config import AppConfig, load_config, setup_logging
from .errors import ConfigurationMissing, WebhookVerificationError
from .github.auth import GitHubAppAuth
from .pipeline import ReviewPipeline
from .webhooks import WebhookDispatcher, WebhookEvent


logger = logging.getLogger(__name__)

Spawner = Callable[[Callable[[], None]], None]


def spawn_thread(task: Callable[[], None]) -> None:
    """Run a task on its own daemon thread."""
    thread = threading.Thread(target=task, name="review-run", daemon=True)
    thread.start()


def build_dispatcher(config: AppConfig, pipeline: ReviewPipeline) -> WebhookDispatcher:
    """Dispatch table for the events this App handles."""
    dispatcher = WebhookDispatcher(secret=config.github.webhook_secret)
    dispatcher.on("pull_request.opened", pipeline.handle_pull_request_opened)
    return dispatcher


def create_app(
    config: AppConfig,
    dispatcher: WebhookDispatcher,
    spawn: Spawner = spawn_thread,
) -> Flask:
    """
    Create the Flask webhook application.

    Args:
        config: Application configuration
        dispatcher: Verifying event dispatcher
        spawn: Runs a dispatch task; defaults to a new thread per delivery
    """
    app = Flask(__name__)

    @app.route('/', methods=['GET'])
    def index():
        return "Hello from Ollama PR Reviewer!"

    @app.route('/api/v1/health', methods=['GET'])
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'healthy',
            'service': 'ollama-pr-reviewer',
            'version': __version__,
        })

    @app.route(config.server.webhook_path, methods=['POST'])
    def receive_webhook():
        """GitHub webhook endpoint."""
        delivery_id = request.headers.get('X-GitHub-Delivery', '')
        event_name = request.headers.get('X-GitHub-Event', '')
        signature = request.headers.get('X-Hub-Signature-256')

        try:
            event = dispatcher.verify(delivery_id, event_name, signature, request.get_data())
        except WebhookVerificationError as e:
            logger.error(f"Webhook error (delivery {delivery_id or 'unknown'}): {e}")
            return "Bad Request", 400

        logger.info(f"Accepted {event_name} delivery {delivery_id}")
        spawn(_dispatch_task(dispatcher, event))
        return "OK", 200

    return app


def _dispatch_task(dispatcher: WebhookDispatcher, event: WebhookEvent) -> Callable[[], None]:
    def task() -> None:
        dispatcher.dispatch(event)
    return task


def main(config_path: Optional[str] = None) -> None:
    """Start the webhook server."""
    load_dotenv()

    if config_path is None and len(sys.argv) > 1:
        config_path = sys.argv[1]

    try:
        config = load_config(config_path)
        private_key = config.github.load_private_key()
    except ConfigurationMissing as e:
        logging.basicConfig(level=logging.ERROR)
        logger.error(str(e))
        sys.exit(1)

    setup_logging(config.logging)

    auth = GitHubAppAuth(
        app_id=config.github.app_id,
        private_key=private_key,
        base_url=config.github.api_base_url,
        timeout=config.github.timeout_seconds,
    )
    pipeline = ReviewPipeline.from_config(config, auth)
    app = create_app(config, build_dispatcher(config, pipeline))

    logger.info(
        f"Server is listening for events at: "
        f"http://{config.server.host}:{config.server.port}{config.server.webhook_path}"
    )
    logger.info("Press Ctrl + C to quit.")

    app.run(host=config.server.host, port=config.server.port, debug=config.debug, use_reloader=False)


if __name__ == '__main__':
    main()
