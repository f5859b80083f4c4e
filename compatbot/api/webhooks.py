"""GitHub webhook handlers."""

import hashlib
import hmac
import logging
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Header, HTTPException, Request, status
from fastapi.responses import PlainTextResponse

from compatbot.api.handlers.pr_review_handler import handle_pr_review
from compatbot.config.settings import settings
from compatbot.models.github_types import PullRequestEvent

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/webhook", tags=["webhooks"])


async def validate_signature(
    request: Request,
    x_hub_signature_256: str | None = Header(None, alias="X-Hub-Signature-256"),
) -> None:
    """
    Validate GitHub webhook signature when a webhook secret is configured.

    Args:
        request: The incoming request
        x_hub_signature_256: GitHub signature from header

    Raises:
        HTTPException: If signature is missing or invalid
    """
    webhook_secret = settings.github_webhook_secret
    if not webhook_secret:
        return

    if not x_hub_signature_256:
        logger.warning("Missing X-Hub-Signature-256 header")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-Hub-Signature-256 header",
        )

    body = await request.body()
    secret = webhook_secret.encode("utf-8")
    expected_signature = f"sha256={hmac.new(secret, body, hashlib.sha256).hexdigest()}"

    if not hmac.compare_digest(expected_signature, x_hub_signature_256):
        logger.warning("Invalid webhook signature")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid signature",
        )


def handle_pull_request_event(
    payload: dict[str, Any], background_tasks: BackgroundTasks
) -> None:
    """Schedule a compatibility review for a pull_request event."""
    try:
        event = PullRequestEvent.from_payload(payload)
    except (KeyError, TypeError, AttributeError, ValueError):
        logger.warning("Ignoring malformed pull_request payload", exc_info=True)
        return

    logger.info(
        f"Pull request received: {payload.get('action')} for PR #{event.pr_number} "
        f"in {event.destination_repo} from {event.origin_repo}:{event.origin_branch}"
    )
    background_tasks.add_task(handle_pr_review, event)


@router.post("/github", response_class=PlainTextResponse)
async def github_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    x_github_event: str | None = Header(None, alias="X-GitHub-Event"),
    x_hub_signature_256: str | None = Header(None, alias="X-Hub-Signature-256"),
) -> str:
    """
    Handle GitHub webhook events.

    The response is sent before any review work starts; review failures
    are only visible in the logs.

    Args:
        request: The incoming request
        background_tasks: Queue for work that runs after the response
        x_github_event: The type of GitHub event
        x_hub_signature_256: GitHub signature for verification

    Returns:
        "OK"
    """
    await validate_signature(request, x_hub_signature_256)

    if x_github_event == "pull_request":
        try:
            payload: dict[str, Any] = await request.json()
        except ValueError:
            logger.warning("Ignoring pull_request event with a non-JSON body")
            return "OK"
        handle_pull_request_event(payload, background_tasks)
    elif x_github_event == "ping":
        logger.info("Received ping event from GitHub")
    else:
        logger.info(f"Ignoring event type: {x_github_event}")

    return "OK"
