"""Tests for docker-run-args rules."""

import pytest

from httpbin_action.validation.rules import (
    CommandInjectionRule,
    FlagFormatRule,
    ShellRedirectionRule,
    VariableExpansionRule,
)


class TestCommandInjectionRule:
    """Test CommandInjectionRule."""

    @pytest.mark.parametrize("token", [
        "--memory=512m;",
        "&",
        "|",
        "--memory=$(curl",
        "--memory=`curl",
        "a&&b",
    ])
    def test_rejects_chaining_and_substitution(self, token):
        message = CommandInjectionRule().check(token)
        assert message is not None
        assert "Command injection" in message

    @pytest.mark.parametrize("token", ["--memory=512m", "512m", "$1", "--name=httpbin"])
    def test_accepts_plain_tokens(self, token):
        assert CommandInjectionRule().check(token) is None

    def test_name(self):
        assert CommandInjectionRule().name == "command_injection"


class TestVariableExpansionRule:
    """Test VariableExpansionRule."""

    def test_rejects_brace_expansion(self):
        message = VariableExpansionRule().check("--env=${HOME}/malicious")
        assert message is not None
        assert "${" in message

    @pytest.mark.parametrize("token", ["--env=$PATH", "$_private", "x$y"])
    def test_rejects_bare_reference(self, token):
        assert VariableExpansionRule().check(token) is not None

    @pytest.mark.parametrize("token", ["$1", "cost=5$", "--price=$", "--env=FOO"])
    def test_accepts_dollar_not_followed_by_name(self, token):
        assert VariableExpansionRule().check(token) is None


class TestShellRedirectionRule:
    """Test ShellRedirectionRule."""

    @pytest.mark.parametrize("token", ["<", ">", ">>", "/tmp/x>y", "-m<1", "--mem1=<x"])
    def test_rejects_redirection(self, token):
        assert ShellRedirectionRule().check(token) == "Shell redirection detected"

    @pytest.mark.parametrize("token", ["--log-opt=tag=<x>", "--label>x", "--label<x"])
    def test_long_flag_carve_out(self, token):
        assert ShellRedirectionRule().check(token) is None

    def test_ignores_tokens_without_angle_brackets(self):
        assert ShellRedirectionRule().check("--log-driver=json-file") is None


class TestFlagFormatRule:
    """Test FlagFormatRule."""

    @pytest.mark.parametrize("token", [
        "-m",
        "--memory",
        "--memory=512m",
        "--cpu-shares=512",
        "--log-opt=max-size=10m",
        "--env=",
        "-p=8080:8080",
    ])
    def test_accepts_valid_flags(self, token):
        assert FlagFormatRule().check(token) is None

    @pytest.mark.parametrize("token", ["--mem@ry=512m", "-", "-m.x", "--a_b", "--mem ry"])
    def test_rejects_malformed_flags(self, token):
        assert FlagFormatRule().check(token) == "Invalid Docker argument format"

    def test_ignores_non_flag_tokens(self):
        assert FlagFormatRule().check("mem@ry") is None
