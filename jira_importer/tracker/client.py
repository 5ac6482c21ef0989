from __future__ import annotations

import logging
from typing import Any, Protocol

import requests
from jira import JIRA, JIRAError

from jira_importer.models.config_models import TrackerConfig

"""Jira client wrapper.

Only two REST operations are used: create issue and list fields. Errors
from the ``jira`` library and the underlying ``requests`` transport are
wrapped so callers only handle TrackerError subclasses.
"""

logger = logging.getLogger(__name__)


class TrackerError(Exception):
    """Remote tracker call failed."""


class IssueCreateError(TrackerError):
    """A single create-issue request failed."""


class IssueTracker(Protocol):
    def create_issue(self, fields: dict[str, Any]) -> str: ...

    def list_fields(self) -> list[dict[str, Any]]: ...


def _describe(e: Exception) -> str:
    if isinstance(e, JIRAError):
        text = e.text or str(e)
        return f"HTTP {e.status_code}: {text}" if e.status_code else text
    return str(e)


class JiraTrackerClient:
    """IssueTracker backed by ``jira.JIRA``.

    Construction does not contact the server (server info lookup is
    disabled) and the library's own retry loop is turned off.
    """

    def __init__(self, jira: JIRA) -> None:
        self._jira = jira

    @classmethod
    def from_config(cls, cfg: TrackerConfig) -> JiraTrackerClient:
        jira = JIRA(
            server=cfg.server_url,
            basic_auth=(cfg.email, cfg.api_token),
            options={"verify": cfg.strict_ssl, "rest_api_version": cfg.api_version},
            get_server_info=False,
            max_retries=0,
        )
        logger.debug("jira client ready server=%s api=%s", cfg.server_url, cfg.api_version)
        return cls(jira)

    def create_issue(self, fields: dict[str, Any]) -> str:
        """Create one issue and return its key (e.g. ``PROJ-12``)."""
        try:
            issue = self._jira.create_issue(fields=fields, prefetch=False)
        except (JIRAError, requests.RequestException) as e:
            raise IssueCreateError(_describe(e)) from e
        return issue.key

    def list_fields(self) -> list[dict[str, Any]]:
        try:
            return list(self._jira.fields())
        except (JIRAError, requests.RequestException) as e:
            raise TrackerError(_describe(e)) from e
