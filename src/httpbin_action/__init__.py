"""httpbin-action - docker-run-args sanitizer and CI helpers for the httpbin test server action.

Screens user-supplied ``docker run`` flags for shell-injection patterns before
the action launches the go-httpbin container, and ships the self-test and
host checks used when running the action locally.
"""

__version__ = "0.1.0"
__author__ = "httpbin-action contributors"
__description__ = "docker-run-args sanitizer and CI helpers for the httpbin test server action"

from httpbin_action.config import ActionConfig
from httpbin_action.validation import ArgumentSanitizer, InvalidArgumentError, validate_arguments

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "ActionConfig",
    "ArgumentSanitizer",
    "InvalidArgumentError",
    "validate_arguments",
]
