"""Error taxonomy.

ConfigMissing and ProvisioningFailure are fatal and raised up to main().
The rest are recoverable: clients hand them back inside a Failure result and
the session loop reports them without unwinding.
"""

from __future__ import annotations

from typing import Optional


class AnalyzerError(Exception):
    """Base class for every error the analyzer reports to the operator."""


class ConfigMissing(AnalyzerError):
    def __init__(self, missing_settings: list[str]) -> None:
        self.missing_settings = missing_settings
        super().__init__(
            "Configuration not found or incomplete! Missing: "
            + ", ".join(missing_settings)
            + "\nProvide them in environment.properties, .env or the environment. Exiting..."
        )


class ProvisioningFailure(AnalyzerError):
    def __init__(self, model: str, cause: str) -> None:
        self.model = model
        self.cause = cause
        super().__init__(
            f"Failed to pull the model: {model}\n"
            f"Error: {cause}\n"
            "Is the ollama instance running?"
        )


class TrackerUnavailable(AnalyzerError):
    def __init__(self, issue_key: str, detail: Optional[str] = None) -> None:
        self.issue_key = issue_key
        self.detail = detail
        super().__init__(
            f"Error loading Jira issue: {issue_key}\n"
            "Is the Jira instance running?\n"
            "Are you connected to the VPN (if applicable)?\n"
        )


class InvalidKeyFormat(AnalyzerError):
    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(f"\nInvalid Jira issue code: '{raw}'\n")


class InferenceFailure(AnalyzerError):
    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(
            f"Error querying the LLM: {detail}\n"
            "Is the ollama instance running?\n"
        )
