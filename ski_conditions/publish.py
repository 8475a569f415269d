"""Publish the conditions document to a GitHub repository file."""

import base64
import logging
from typing import Optional

import requests

from ski_conditions.config import (
    COMMIT_MESSAGE,
    GITHUB_API_URL,
    REQUEST_TIMEOUT,
    USER_AGENT,
    Settings,
)
from ski_conditions.http import with_retry
from ski_conditions.models import ConditionsDocument
from ski_conditions.output import render_json

logger = logging.getLogger(__name__)


class PublishError(Exception):
    """Error reading or writing the destination file."""
    pass


def _contents_url(settings: Settings) -> str:
    return (
        f"{GITHUB_API_URL}/repos/{settings.github_owner}/{settings.github_repo}"
        f"/contents/{settings.conditions_path}"
    )


def _headers(settings: Settings) -> dict:
    return {
        "Authorization": f"Bearer {settings.github_token}",
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
        "User-Agent": USER_AGENT,
    }


def get_revision(settings: Settings) -> Optional[str]:
    """
    Read the blob SHA of the destination file.

    Returns:
        The SHA, or None if the file does not exist yet
    """
    params = {"ref": settings.github_branch} if settings.github_branch else None

    def attempt() -> Optional[str]:
        response = requests.get(
            _contents_url(settings),
            headers=_headers(settings),
            params=params,
            timeout=REQUEST_TIMEOUT,
        )
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.json().get("sha")

    return with_retry(attempt)


def write_contents(settings: Settings, content: str, sha: Optional[str]) -> dict:
    """
    Create or update the destination file.

    The SHA is sent only when updating; GitHub rejects an update whose SHA
    does not match the current file.
    """
    payload = {
        "message": COMMIT_MESSAGE,
        "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
    }
    if sha:
        payload["sha"] = sha
    if settings.github_branch:
        payload["branch"] = settings.github_branch

    def attempt() -> dict:
        response = requests.put(
            _contents_url(settings),
            headers=_headers(settings),
            json=payload,
            timeout=REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        return response.json()

    return with_retry(attempt)


def publish_document(document: ConditionsDocument, settings: Settings) -> None:
    """
    Commit the document as pretty-printed JSON to the configured path.

    Args:
        document: Document to publish
        settings: Settings with GitHub credentials and destination

    Raises:
        ConfigError: If credentials are missing
        PublishError: If reading or writing fails after retries
    """
    settings.require_publishing()
    target = f"{settings.github_owner}/{settings.github_repo}:{settings.conditions_path}"

    try:
        sha = get_revision(settings)
        if sha is None:
            logger.info(f"{target} does not exist yet, will create it")
        else:
            logger.debug(f"Updating {target} at {sha}")

        write_contents(settings, render_json(document), sha)

    except requests.exceptions.RequestException as e:
        raise PublishError(f"Failed to publish {target}: {e}") from e

    logger.info(f"Published {target}")
