"""Webhook event handlers."""

from compatbot.api.handlers.pr_review_handler import handle_pr_review

__all__ = ["handle_pr_review"]
