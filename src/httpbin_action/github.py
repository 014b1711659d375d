"""GitHub Actions runner integration: inputs, outputs and annotations."""

import logging
import os
import uuid
from pathlib import Path

logger = logging.getLogger(__name__)


def input_env_name(name: str) -> str:
    """Environment variable the runner uses for an action input."""
    return "INPUT_" + name.replace(" ", "_").upper()


def read_input(name: str, env: dict[str, str] | None = None) -> str:
    """Read an action input; missing inputs read as an empty string."""
    env = os.environ if env is None else env
    return env.get(input_env_name(name), "").strip()


def escape_data(value: str) -> str:
    """Escape a workflow command message."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    """Escape a workflow command property value."""
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def error_annotation(message: str, title: str | None = None) -> str:
    """Format an ``::error`` workflow command."""
    props = f" title={escape_property(title)}" if title else ""
    return f"::error{props}::{escape_data(message)}"


def is_github_actions(env: dict[str, str] | None = None) -> bool:
    env = os.environ if env is None else env
    return env.get("GITHUB_ACTIONS") == "true"


def write_output(name: str, value: str, path: str | Path | None = None,
                 env: dict[str, str] | None = None) -> bool:
    """Append a step output to the ``GITHUB_OUTPUT`` file.

    Args:
        name: Output name
        value: Output value; multi-line values use a heredoc delimiter
        path: Output file (default: ``$GITHUB_OUTPUT``)

    Returns:
        True if the output was written, False if no output file is configured
    """
    if path is None:
        env = os.environ if env is None else env
        path = env.get("GITHUB_OUTPUT")
    if not path:
        logger.debug(f"GITHUB_OUTPUT not set, skipping output '{name}'")
        return False

    if "\n" in value or "\r" in value:
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        entry = f"{name}<<{delimiter}\n{value}\n{delimiter}\n"
    else:
        entry = f"{name}={value}\n"

    with open(path, "a", encoding="utf-8") as f:
        f.write(entry)
    logger.debug(f"Wrote output '{name}' to {path}")
    return True
