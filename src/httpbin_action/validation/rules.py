"""Shell-injection rules for docker-run-args tokens.

Each rule screens one token for one family of shell constructs. The checks
are pattern matches, not a shell parse: the accepted tokens are passed to the
container runtime as an argument vector, so the rules only need to keep
anything shell-meaningful out of a later stage.
"""

import re

from .framework import ArgumentRule

# Characters and sequences that chain or substitute commands.
CHAINING_PATTERNS = (";", "&", "|", "$(", "`")

_BARE_VARIABLE = re.compile(r"\$[A-Za-z_]")

# Long flags such as --log-opt=... may carry '<' or '>' in their value.
_LONG_FLAG_WITH_VALUE = re.compile(r"^--[a-zA-Z-]+[<>=]")

_FLAG_GRAMMAR = re.compile(r"--?[a-zA-Z0-9-]+(=.*)?", re.DOTALL)


class CommandInjectionRule(ArgumentRule):
    """Reject command chaining and command substitution."""

    @property
    def name(self) -> str:
        return "command_injection"

    def check(self, token: str) -> str | None:
        for pattern in CHAINING_PATTERNS:
            if pattern in token:
                return f"Command injection pattern {pattern!r} detected"
        return None


class VariableExpansionRule(ArgumentRule):
    """Reject ``${...}`` and bare ``$NAME`` expansions."""

    @property
    def name(self) -> str:
        return "variable_expansion"

    def check(self, token: str) -> str | None:
        if "${" in token:
            return "Variable expansion '${' detected"
        match = _BARE_VARIABLE.search(token)
        if match:
            return f"Variable reference {match.group(0)!r} detected"
        return None


class ShellRedirectionRule(ArgumentRule):
    """Reject '<' and '>' outside the long-flag-with-value form."""

    @property
    def name(self) -> str:
        return "shell_redirection"

    def check(self, token: str) -> str | None:
        if "<" not in token and ">" not in token:
            return None
        if _LONG_FLAG_WITH_VALUE.match(token):
            return None
        return "Shell redirection detected"


class FlagFormatRule(ArgumentRule):
    """Flag-shaped tokens must be ``-x``, ``--name`` or ``--name=value``."""

    @property
    def name(self) -> str:
        return "flag_format"

    def check(self, token: str) -> str | None:
        if not token.startswith("-"):
            return None
        if _FLAG_GRAMMAR.fullmatch(token):
            return None
        return "Invalid Docker argument format"
