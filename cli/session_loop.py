from __future__ import annotations

from typing import Callable, Optional

from app_logging.activity_logger import ActivityLogger
from llm.ollama_client import OllamaClient
from prompts.uac_prompt import build_prompt
from schemas.issue import IssueKey, IssueSnapshot, parse_issue_key
from schemas.result import Failure, Success
from schemas.session_state import SessionState
from schemas.verdict import Verdict
from tracker.jira_client import JiraClient

logger = ActivityLogger("session_loop")

EXIT_SENTINEL = "exit"
KEY_PROMPT = "Enter Jira issue code (or type 'exit' to quit): "
RETRY_PROMPT = "Enter Jira issue code: "


class SessionLoop:
    """
    Interactive read-analyse-report loop.

    AWAITING_KEY → VALIDATING → FETCHING → PROMPTING → QUERYING → REPORTING
    and back to AWAITING_KEY. EXIT is reached from VALIDATING on the exit
    sentinel or when input runs out. Per-issue failures are reported and
    the loop carries on with the next key.
    """

    def __init__(
        self,
        tracker: JiraClient,
        inference: OllamaClient,
        input_fn: Optional[Callable[[str], str]] = None,
        output_fn: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._tracker = tracker
        self._inference = inference
        self._input = input_fn or input
        self._output = output_fn or print

    def run(self) -> int:
        state = SessionState.AWAITING_KEY
        prompt_text = KEY_PROMPT
        raw = ""
        key: Optional[IssueKey] = None
        snapshot: Optional[IssueSnapshot] = None
        prompt = ""
        verdict: Optional[Verdict] = None

        while state is not SessionState.EXIT:
            if state is SessionState.AWAITING_KEY:
                try:
                    raw = self._input(prompt_text).strip()
                except EOFError:
                    state = SessionState.EXIT
                    continue
                state = SessionState.VALIDATING

            elif state is SessionState.VALIDATING:
                if raw == EXIT_SENTINEL:
                    state = SessionState.EXIT
                    continue
                match parse_issue_key(raw):
                    case Success(value=key):
                        prompt_text = KEY_PROMPT
                        state = SessionState.FETCHING
                    case Failure(error=error):
                        logger.info("session_key_rejected", raw_input=raw)
                        self._output(str(error))
                        prompt_text = RETRY_PROMPT
                        state = SessionState.AWAITING_KEY

            elif state is SessionState.FETCHING:
                snapshot = self._fetch(key)
                state = SessionState.AWAITING_KEY if snapshot is None else SessionState.PROMPTING

            elif state is SessionState.PROMPTING:
                prompt = build_prompt(snapshot)
                snapshot = None
                state = SessionState.QUERYING

            elif state is SessionState.QUERYING:
                verdict = self._query(prompt)
                state = SessionState.AWAITING_KEY if verdict is None else SessionState.REPORTING

            elif state is SessionState.REPORTING:
                self._report(key, verdict)
                state = SessionState.AWAITING_KEY

        logger.info("session_exited")
        return 0

    def analyze(self, key: IssueKey) -> bool:
        """Run one fetch → prompt → query → report pass. Returns True if a verdict was printed."""
        snapshot = self._fetch(key)
        if snapshot is None:
            return False
        verdict = self._query(build_prompt(snapshot))
        if verdict is None:
            return False
        self._report(key, verdict)
        return True

    # ── Pipeline steps shared by run() and analyze() ──────────────────────────

    def _fetch(self, key: IssueKey) -> Optional[IssueSnapshot]:
        match self._tracker.fetch_issue(key):
            case Success(value=snapshot):
                return snapshot
            case Failure(error=error):
                self._output(str(error))
        return None

    def _query(self, prompt: str) -> Optional[Verdict]:
        self._output("Querying the LLM...")
        match self._inference.generate(prompt):
            case Success(value=verdict):
                return verdict
            case Failure(error=error):
                self._output(str(error))
        return None

    def _report(self, key: IssueKey, verdict: Verdict) -> None:
        logger.info("session_verdict_reported", issue_key=key)
        self._output(f"Result: {verdict}\n")
