"""
Environment accessors.

Values that must come from the process environment rather than the
Pushline configuration file.
"""

from __future__ import annotations

import os
from typing import Mapping
from urllib.parse import urlparse

from pushline.errors import ConfigurationError

DOCKER_HOST_VARIABLE = "DOCKER_HOST"


def read_docker_host(environ: Mapping[str, str] | None = None) -> str:
    """
    Read the Docker daemon hostname from DOCKER_HOST.

    Args:
        environ: Environment to read from (defaults to os.environ)

    Returns:
        Host component of the daemon URL, e.g. "1.2.3.4" for
        "tcp://1.2.3.4:2376"

    Raises:
        ConfigurationError: If the variable is unset or has no host
    """
    environ = os.environ if environ is None else environ
    value = environ.get(DOCKER_HOST_VARIABLE)
    if not value:
        raise ConfigurationError(
            f"{DOCKER_HOST_VARIABLE} environment variable not set",
            DOCKER_HOST_VARIABLE,
        )

    try:
        hostname = urlparse(value).hostname
    except ValueError as e:
        raise ConfigurationError(
            f"{DOCKER_HOST_VARIABLE} is not a valid URL: {value}", DOCKER_HOST_VARIABLE
        ) from e

    if not hostname:
        raise ConfigurationError(
            f"{DOCKER_HOST_VARIABLE} has no host component: {value}", DOCKER_HOST_VARIABLE
        )
    return hostname
