from __future__ import annotations

import re
from typing import Any, NewType

from pydantic import BaseModel, ConfigDict, Field

from schemas.errors import InvalidKeyFormat
from schemas.result import Failure, Result, Success

IssueKey = NewType("IssueKey", str)

ISSUE_KEY_PATTERN = re.compile(r"[A-Za-z]+-\d+", re.ASCII)


def parse_issue_key(raw: str) -> Result[IssueKey]:
    """Validate operator input as a Jira issue key, e.g. ``PROJ-123``."""
    if ISSUE_KEY_PATTERN.fullmatch(raw):
        return Success(IssueKey(raw))
    return Failure(InvalidKeyFormat(raw))


class IssueComment(BaseModel):
    model_config = ConfigDict(frozen=True)

    created: str
    author: str
    body: str


class IssueSnapshot(BaseModel):
    """Read-only projection of the Jira fields the UAC prompt needs."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str = ""
    attachment_count: int = Field(default=0, ge=0)
    issue_type: str = ""
    status: str = ""
    comments: tuple[IssueComment, ...] = ()

    @classmethod
    def from_jira(cls, data: dict) -> IssueSnapshot:
        """Convert a raw ``/rest/api/2/issue/{key}`` response body."""
        fields = _as_dict(data.get("fields"))

        comment_block = _as_dict(fields.get("comment"))
        comments = tuple(
            IssueComment(
                created=str(c.get("created") or ""),
                author=_name_of(c.get("author")),
                body=_flatten_adf(c.get("body") or ""),
            )
            for c in _as_list(comment_block.get("comments"))
            if isinstance(c, dict)
        )

        return cls(
            title=str(fields.get("summary") or ""),
            description=_flatten_adf(fields.get("description") or ""),
            attachment_count=len(_as_list(fields.get("attachment"))),
            issue_type=_name_of(fields.get("issuetype"), key="name"),
            status=_name_of(fields.get("status"), key="name"),
            comments=comments,
        )


def _as_dict(obj: Any) -> dict:
    return obj if isinstance(obj, dict) else {}


def _as_list(obj: Any) -> list:
    return obj if isinstance(obj, list) else []


def _name_of(obj: Any, key: str = "displayName") -> str:
    if isinstance(obj, dict):
        return str(obj.get(key) or "")
    return ""


def _flatten_adf(adf: Any) -> str:
    """Recursively extract plain text from Atlassian Document Format."""
    if isinstance(adf, str):
        return adf
    if isinstance(adf, dict):
        texts = []
        if adf.get("type") == "text":
            texts.append(adf.get("text", ""))
        for child in adf.get("content", []):
            texts.append(_flatten_adf(child))
        return " ".join(t for t in texts if t).strip()
    if isinstance(adf, list):
        return " ".join(_flatten_adf(item) for item in adf)
    return str(adf)
