"""Core argument sanitizer for docker-run-args.

Screens a raw, user-controlled string of extra ``docker run`` flags with an
ordered set of pluggable rules. Any violation in any token rejects the whole
string; accepted strings are returned as an argument vector that is handed to
the container runtime directly, never re-evaluated by a shell.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

from ..config import ActionConfig, create_default_config

logger = logging.getLogger(__name__)


class ValidationStatus(str, Enum):
    """Verdict of a validation run."""
    PASS = "pass"
    FAIL = "fail"


@dataclass
class ValidationIssue:
    """A single rejected token."""
    rule: str
    severity: ValidationStatus
    message: str
    token: str | None = None
    position: int | None = None

    def __str__(self) -> str:
        location = f" in '{self.token}'" if self.token is not None else ""
        return f"[{self.severity.value.upper()}] {self.rule}: {self.message}{location}"


@dataclass
class ValidationResult:
    """Results of validating one argument string."""
    status: ValidationStatus
    issues: list[ValidationIssue] = field(default_factory=list)
    counters: dict[str, int] = field(default_factory=dict)
    tokens: list[str] = field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return self.status == ValidationStatus.PASS

    @property
    def exit_code(self) -> int:
        """Exit code for CI: 0 = accept, 1 = reject."""
        return 0 if self.accepted else 1

    @property
    def rejection(self) -> ValidationIssue | None:
        """First issue found, which is the one reported to the user."""
        return self.issues[0] if self.issues else None

    def add_issue(self, rule: str, severity: ValidationStatus, message: str,
                  token: str | None = None, position: int | None = None) -> None:
        """Add a validation issue."""
        self.issues.append(ValidationIssue(rule, severity, message, token, position))

        if severity == ValidationStatus.FAIL:
            self.status = ValidationStatus.FAIL

    def increment_counter(self, name: str, value: int = 1) -> None:
        """Increment a counter."""
        self.counters[name] = self.counters.get(name, 0) + value

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "status": self.status.value,
            "accepted": self.accepted,
            "exit_code": self.exit_code,
            "counters": self.counters,
            "tokens": self.tokens if self.accepted else [],
            "issues": [
                {
                    "rule": issue.rule,
                    "severity": issue.severity.value,
                    "message": issue.message,
                    "token": issue.token,
                    "position": issue.position
                }
                for issue in self.issues
            ]
        }


class InvalidArgumentError(ValueError):
    """Raised when a docker-run-args string is rejected."""

    def __init__(self, token: str | None, rule: str, message: str):
        self.token = token
        self.rule = rule
        self.message = message
        super().__init__(f"{rule}: {message}")

    @classmethod
    def from_issue(cls, issue: ValidationIssue) -> "InvalidArgumentError":
        return cls(issue.token, issue.rule, issue.message)


class ArgumentRule(ABC):
    """Base class for per-token rules."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Rule name for identification."""
        pass

    @abstractmethod
    def check(self, token: str) -> str | None:
        """Check a single non-empty token.

        Args:
            token: One space-delimited argument

        Returns:
            A violation message, or None if the token passes this rule
        """
        pass


def split_arguments(raw: str | None) -> list[str]:
    """Split a raw argument string on spaces, dropping empty tokens.

    Tabs and newlines stay inside their token so the rules see them.
    """
    if not raw:
        return []
    return [token for token in raw.split(" ") if token]


class ArgumentSanitizer:
    """Validates docker-run-args strings against an ordered rule list."""

    def __init__(self, config: ActionConfig | None = None):
        self.config = config or create_default_config()
        self.rules: list[ArgumentRule] = []

    def add_rule(self, rule: ArgumentRule) -> None:
        """Add a rule. Rules run in insertion order."""
        self.rules.append(rule)

    def create_default_rules(self) -> None:
        """Install the default shell-injection rules."""
        from .rules import (
            CommandInjectionRule,
            FlagFormatRule,
            ShellRedirectionRule,
            VariableExpansionRule,
        )

        self.add_rule(CommandInjectionRule())
        self.add_rule(VariableExpansionRule())
        self.add_rule(ShellRedirectionRule())
        self.add_rule(FlagFormatRule())

    def validate(self, raw: str | None) -> ValidationResult:
        """Validate a raw argument string.

        Args:
            raw: Space-delimited extra flags for ``docker run``

        Returns:
            ValidationResult; ``tokens`` holds the argument vector when accepted
        """
        result = ValidationResult(status=ValidationStatus.PASS)
        tokens = split_arguments(raw)
        report_all = self.config.validation.report_all

        if not tokens:
            logger.debug("No docker-run-args supplied, nothing to validate")
            return result

        for position, token in enumerate(tokens):
            logger.debug(f"Validating argument: '{token}'")
            result.increment_counter("tokens_checked")

            if self._check_token(token, position, result, report_all):
                result.increment_counter("tokens_accepted")
                continue

            result.increment_counter("tokens_rejected")
            if not report_all:
                break

        if result.accepted:
            result.tokens = tokens
            logger.info(f"All {len(tokens)} arguments passed validation")
        else:
            first = result.rejection
            logger.warning(f"Rejected docker-run-args: {first}")

        return result

    def ensure_valid(self, raw: str | None) -> list[str]:
        """Validate and return the argument vector.

        Raises:
            InvalidArgumentError: If any token is rejected
        """
        result = self.validate(raw)
        if not result.accepted:
            raise InvalidArgumentError.from_issue(result.rejection)
        return result.tokens

    def _check_token(self, token: str, position: int, result: ValidationResult,
                     report_all: bool) -> bool:
        ok = True
        for rule in self.rules:
            try:
                message = rule.check(token)
            except Exception as e:
                logger.error(f"Rule {rule.name} failed with error: {e}")
                message = f"Rule execution failed: {e}"

            if message is None:
                continue

            result.add_issue(rule.name, ValidationStatus.FAIL, message, token=token, position=position)
            ok = False
            if not report_all:
                break
        return ok


def validate_arguments(raw: str | None, config: ActionConfig | None = None) -> ValidationResult:
    """Validate ``raw`` with the default rule set."""
    sanitizer = ArgumentSanitizer(config)
    sanitizer.create_default_rules()
    return sanitizer.validate(raw)
