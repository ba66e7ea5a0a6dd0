from __future__ import annotations

from typing import Iterable

from schemas.issue import IssueComment, IssueSnapshot

# Issue fields are substituted verbatim; str.format does not re-scan inserted values.
UAC_PROMPT_TEMPLATE = """Analyze the following Jira issue and report whether it contains adequate user acceptance criteria to allow members involved in the Agile pipeline to understand what is necessary to validate the changes on the issue. The idea is to help us decide whether we need to ask the issue reporters to provide more information if necessary.
  Respond in the following JSON format:

  {{"contains_uac": <boolean>, "should_manually_review": <boolean>}}

  Guidelines:
  - If the issue clearly describes, implies, outlines, or references any sort of context, information, instructions, or attachments that seem to provide an idea of what is necessary, respond with {{"contains_uac": true}}
  - If the issue details are lacking in information and/or attachments and likely don't contain sufficient specific criteria for our QA team, respond with {{"contains_uac": false}}.
  - If you are unsure or unable to determine whether the issue contains user acceptance criteria and are confident that further review is warranted, respond with {{"contains_uac": <boolean>, "should_manually_review": true}}, otherwise respond with {{"contains_uac": <boolean>, "should_manually_review": false}}. Use this option SPARINGLY.

  Jira issue:
  Title: {title}
  Description: {description}
  Attachments: {attachments}
  Issue Type: {issue_type}
  Status: {status}
  Comments: {comments}
"""


def render_comments(comments: Iterable[IssueComment]) -> str:
    return "".join(f"{c.created} - {c.author}: {c.body}\n" for c in comments)


def build_prompt(snapshot: IssueSnapshot) -> str:
    return UAC_PROMPT_TEMPLATE.format(
        title=snapshot.title,
        description=snapshot.description,
        attachments=snapshot.attachment_count,
        issue_type=snapshot.issue_type,
        status=snapshot.status,
        comments=render_comments(snapshot.comments),
    )
