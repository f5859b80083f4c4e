"""Resolve the browser targets a repository wants its stylesheets checked against."""

import logging
import re

import httpx

from compatbot.config.settings import Settings, settings as default_settings
from compatbot.services.github_client import GitHubClient

logger = logging.getLogger(__name__)

# Commas and line breaks both separate targets
TARGET_SEPARATOR = re.compile(r"\r\n|\r|\n|,")


def parse_targets(text: str) -> tuple[str, ...]:
    """Split config file text into individual browser targets.

    Args:
        text: Raw content of the config file

    Returns:
        Non-blank targets in file order
    """
    segments = (segment.strip() for segment in TARGET_SEPARATOR.split(text))
    return tuple(segment for segment in segments if segment)


async def resolve_config(
    client: GitHubClient,
    repo: str,
    branch: str,
    settings: Settings | None = None,
) -> tuple[str, ...]:
    """Get the browser targets for a repository branch.

    A missing or unreadable config file is not an error: the built-in
    defaults are used instead.

    Args:
        client: GitHub client
        repo: Repository full name the config is read from
        branch: Branch to read the config from
        settings: Settings holding the config filename and defaults

    Returns:
        Browser targets, e.g. ("last 2 versions",)
    """
    settings = settings or default_settings
    defaults = tuple(settings.default_browsers)

    try:
        text = await client.get_file_content(repo, settings.config_filename, branch)
    except httpx.HTTPStatusError as e:
        if e.response.status_code == 404:
            logger.info(
                f"No {settings.config_filename} in {repo}@{branch}, using defaults"
            )
        else:
            logger.warning(
                f"Fetching {settings.config_filename} from {repo}@{branch} failed "
                f"with HTTP {e.response.status_code}, using defaults"
            )
        return defaults
    except (httpx.HTTPError, ValueError, UnicodeDecodeError) as e:
        logger.warning(
            f"Fetching {settings.config_filename} from {repo}@{branch} failed: {e}, "
            "using defaults"
        )
        return defaults

    targets = parse_targets(text)
    if not targets:
        logger.info(f"{settings.config_filename} in {repo}@{branch} is empty, using defaults")
        return defaults

    logger.info(f"Using browser targets from {repo}@{branch}: {', '.join(targets)}")
    return targets
