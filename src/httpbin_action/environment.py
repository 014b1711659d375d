"""Host prerequisite checks for running the action locally."""

import getpass
import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

STANDARD_DOCKER_SOCKET = Path("/var/run/docker.sock")


@dataclass
class ToolCheck:
    """Presence of one external command on PATH."""
    name: str
    required: bool
    path: str | None = None

    @property
    def found(self) -> bool:
        return self.path is not None


@dataclass
class EnvironmentReport:
    """Result of the prerequisite checks."""
    checks: list[ToolCheck] = field(default_factory=list)
    docker_host: str | None = None

    @property
    def missing_required(self) -> list[str]:
        return [c.name for c in self.checks if c.required and not c.found]

    @property
    def ready(self) -> bool:
        return not self.missing_required

    def to_dict(self) -> dict:
        return {
            "ready": self.ready,
            "docker_host": self.docker_host,
            "tools": [
                {"name": c.name, "required": c.required, "found": c.found, "path": c.path}
                for c in self.checks
            ]
        }


def check_prerequisites(required: list[str], optional: list[str] | None = None) -> list[ToolCheck]:
    """Look up each tool on PATH."""
    checks = []
    for name in required:
        checks.append(ToolCheck(name, True, shutil.which(name)))
    for name in optional or []:
        checks.append(ToolCheck(name, False, shutil.which(name)))

    for check in checks:
        if check.found:
            logger.debug(f"Found {check.name} at {check.path}")
        elif check.required:
            logger.warning(f"Required tool not found on PATH: {check.name}")
    return checks


def _desktop_socket(user: str | None) -> Path | None:
    if user is None:
        try:
            user = getpass.getuser()
        except (KeyError, OSError):
            return None
    return Path("/Users") / user / ".docker" / "run" / "docker.sock"


def detect_docker_host(user: str | None = None,
                       candidates: list[Path] | None = None,
                       env: dict[str, str] | None = None) -> str | None:
    """Work out which Docker socket to talk to.

    An explicit ``DOCKER_HOST`` wins. Otherwise the Docker Desktop socket
    (macOS) is preferred over the standard daemon socket.

    Returns:
        A ``unix://`` URI, or None to use the default Docker configuration
    """
    env = os.environ if env is None else env
    if env.get("DOCKER_HOST"):
        return env["DOCKER_HOST"]

    if candidates is None:
        candidates = [p for p in (_desktop_socket(user), STANDARD_DOCKER_SOCKET) if p is not None]

    for socket_path in candidates:
        if socket_path.is_socket():
            logger.debug(f"Using Docker socket: {socket_path}")
            return f"unix://{socket_path}"

    logger.debug("No Docker socket found, using default Docker configuration")
    return None


def inspect_environment(required: list[str], optional: list[str] | None = None,
                        env: dict[str, str] | None = None) -> EnvironmentReport:
    """Run all host checks."""
    return EnvironmentReport(
        checks=check_prerequisites(required, optional),
        docker_host=detect_docker_host(env=env)
    )
