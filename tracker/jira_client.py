from __future__ import annotations

import httpx

from app_logging.activity_logger import ActivityLogger
from schemas.errors import TrackerUnavailable
from schemas.issue import IssueKey, IssueSnapshot
from schemas.result import Failure, Result, Success

logger = ActivityLogger("jira_client")

ISSUE_ENDPOINT = "/rest/api/2/issue/{key}"


class JiraClient:
    """Read-only access to single Jira issues over the REST v2 API."""

    def __init__(self, http: httpx.Client) -> None:
        self._http = http

    def fetch_issue(self, key: IssueKey) -> Result[IssueSnapshot]:
        """
        Fetch one issue and project it onto an IssueSnapshot.

        Expects the key to be validated already. Anything other than an
        HTTP 200 with a JSON object body comes back as TrackerUnavailable.
        """
        try:
            response = self._http.get(ISSUE_ENDPOINT.format(key=key))
        except httpx.HTTPError as exc:
            logger.error("jira_issue_fetch_failed", exc=exc, issue_key=key)
            return Failure(TrackerUnavailable(key, detail=str(exc)))

        if response.status_code != 200:
            logger.error(
                "jira_issue_fetch_failed",
                issue_key=key,
                status_code=response.status_code,
            )
            return Failure(TrackerUnavailable(key, detail=f"HTTP {response.status_code}"))

        try:
            data = response.json()
        except ValueError as exc:
            logger.error("jira_issue_fetch_failed", exc=exc, issue_key=key)
            return Failure(TrackerUnavailable(key, detail="response body is not JSON"))

        if not isinstance(data, dict):
            return Failure(TrackerUnavailable(key, detail="unexpected response shape"))

        try:
            snapshot = IssueSnapshot.from_jira(data)
        except (ValueError, AttributeError, TypeError) as exc:
            logger.error("jira_issue_parse_failed", exc=exc, issue_key=key)
            return Failure(TrackerUnavailable(key, detail=f"unexpected issue payload: {exc}"))

        logger.info(
            "jira_issue_fetched",
            issue_key=key,
            title=snapshot.title,
            comment_count=len(snapshot.comments),
        )
        return Success(snapshot)
