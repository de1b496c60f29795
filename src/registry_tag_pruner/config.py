"""Prune options and their validation."""

import os
import re
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .exceptions import ConfigurationError

DEFAULT_ARCHITECTURE = "amd64"
DEFAULT_REQUEST_DELAY = 0.05
DEFAULT_MAX_REQUEST_DELAY = 5.0
DEFAULT_TIMEOUT = 30.0

TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class PruneOptions:
    """Everything a prune run needs, supplied once before any network activity."""

    domain: str
    image: str
    regex: re.Pattern[str]
    user: str = ""
    password: str = field(default="", repr=False)
    architecture: str = DEFAULT_ARCHITECTURE
    dry_run: bool = False
    request_delay: float = DEFAULT_REQUEST_DELAY
    max_request_delay: float = DEFAULT_MAX_REQUEST_DELAY
    timeout: float = DEFAULT_TIMEOUT


def compile_pattern(regex: str) -> re.Pattern[str]:
    """Compile the keep pattern.

    Raises:
        ConfigurationError: If the pattern is empty or not a valid regex
    """
    if not regex:
        raise ConfigurationError("Missing required input: regex")
    try:
        return re.compile(regex)
    except re.error as e:
        raise ConfigurationError(f"Invalid keep pattern {regex!r}: {e}") from e


def load_options(
    domain: Optional[str],
    image: Optional[str],
    regex: Optional[str],
    user: Optional[str] = None,
    password: Optional[str] = None,
    architecture: str = DEFAULT_ARCHITECTURE,
    dry_run: bool = False,
    request_delay: float = DEFAULT_REQUEST_DELAY,
    max_request_delay: float = DEFAULT_MAX_REQUEST_DELAY,
    timeout: float = DEFAULT_TIMEOUT,
) -> PruneOptions:
    """Validate raw input and build PruneOptions.

    Args:
        domain: Registry domain, scheme optional
        image: Image (repository) name, e.g. "team/app"
        regex: Keep pattern, Python ``re`` syntax
        user: User name for HTTP Basic auth
        password: Password for HTTP Basic auth
        architecture: Platform used to pick one reference per multi-arch tag
        dry_run: Compute the kill list but do not delete anything
        request_delay: Linear backoff step between requests, in seconds
        max_request_delay: Upper bound of the backoff delay, in seconds
        timeout: Per-request timeout, in seconds

    Returns:
        PruneOptions (domain not yet normalized)

    Raises:
        ConfigurationError: If required input is missing or invalid
    """
    domain = (domain or "").strip()
    image = (image or "").strip().strip("/")
    if not domain:
        raise ConfigurationError("Missing required input: domain")
    if not image:
        raise ConfigurationError("Missing required input: image")
    if user and ":" in user:
        raise ConfigurationError('User name must not contain ":"')
    pattern = compile_pattern(regex or "")

    if not architecture:
        raise ConfigurationError("Architecture must not be empty")
    for name, value in (
        ("request_delay", request_delay),
        ("max_request_delay", max_request_delay),
        ("timeout", timeout),
    ):
        if value < 0:
            raise ConfigurationError(f"{name} must not be negative, got {value}")

    return PruneOptions(
        domain=domain,
        image=image,
        regex=pattern,
        user=user or "",
        password=password or "",
        architecture=architecture,
        dry_run=dry_run,
        request_delay=request_delay,
        max_request_delay=max_request_delay,
        timeout=timeout,
    )


def parse_bool(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in TRUE_VALUES


def parse_float(name: str, value: Optional[str], default: float) -> float:
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e


def env_inputs(environ: Optional[Mapping[str, str]] = None) -> dict[str, Optional[str]]:
    """Read the ``INPUT_*`` variables a GitHub Actions runner sets for action inputs."""
    environ = os.environ if environ is None else environ
    names = (
        "domain",
        "user",
        "password",
        "image",
        "regex",
        "architecture",
        "dry_run",
        "request_delay",
        "timeout",
    )
    return {name: environ.get(f"INPUT_{name.upper()}") for name in names}


def options_from_env(environ: Optional[Mapping[str, str]] = None) -> PruneOptions:
    """Build PruneOptions from ``INPUT_*`` environment variables.

    Raises:
        ConfigurationError: If required input is missing or invalid
    """
    inputs = env_inputs(environ)
    return load_options(
        domain=inputs["domain"],
        image=inputs["image"],
        regex=inputs["regex"],
        user=inputs["user"],
        password=inputs["password"],
        architecture=inputs["architecture"] or DEFAULT_ARCHITECTURE,
        dry_run=parse_bool(inputs["dry_run"]),
        request_delay=parse_float(
            "request_delay", inputs["request_delay"], DEFAULT_REQUEST_DELAY
        ),
        timeout=parse_float("timeout", inputs["timeout"], DEFAULT_TIMEOUT),
    )
