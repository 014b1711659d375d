"""Validation layer for docker-run-args.

Screens the user-supplied extra ``docker run`` flags for shell-injection
patterns before they reach the container launch step.
"""

from .framework import (
    ArgumentRule,
    ArgumentSanitizer,
    InvalidArgumentError,
    ValidationIssue,
    ValidationResult,
    ValidationStatus,
    split_arguments,
    validate_arguments,
)
from .rules import (
    CommandInjectionRule,
    FlagFormatRule,
    ShellRedirectionRule,
    VariableExpansionRule,
)

__all__ = [
    "ArgumentRule",
    "ArgumentSanitizer",
    "InvalidArgumentError",
    "ValidationIssue",
    "ValidationResult",
    "ValidationStatus",
    "split_arguments",
    "validate_arguments",
    "CommandInjectionRule",
    "VariableExpansionRule",
    "ShellRedirectionRule",
    "FlagFormatRule"
]
