# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: 2026 qops

"""
Configuration management.

Settings are read from environment variables by :func:`load_config` and
cached process-wide by :func:`get_config`.

Environment Variables
---------------------
QOPS_ERROR_POLICY
    Default batch error policy: ``raise`` (default), ``skip`` or
    ``collect``.
QOPS_GATE_FALLBACK
    Whether unrecognized instruction names load as generic gates
    (default ``true``). When disabled they raise ``UnknownNameError``.

Examples
--------
>>> from qops.config import Config, ErrorPolicy, set_config
>>> set_config(Config(error_policy=ErrorPolicy.COLLECT))

>>> from qops.config import reset_config
>>> reset_config()  # next get_config() reloads from environment
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from enum import Enum


logger = logging.getLogger(__name__)

_TRUTHY = frozenset({"1", "true", "yes", "on"})


class ErrorPolicy(str, Enum):
    """
    How a batch load treats records that fail validation.

    Attributes
    ----------
    RAISE
        Propagate the first failure to the caller.
    SKIP
        Drop failing records and log a warning.
    COLLECT
        Drop failing records and report them in the load result.
    """

    RAISE = "raise"
    SKIP = "skip"
    COLLECT = "collect"


@dataclass(frozen=True)
class Config:
    """
    Loader configuration.

    Parameters
    ----------
    error_policy : ErrorPolicy
        Default policy used by ``load_ops`` when none is passed.
    gate_fallback : bool
        If True, instruction names without a dedicated constructor are
        loaded as generic gates.
    """

    error_policy: ErrorPolicy = ErrorPolicy.RAISE
    gate_fallback: bool = True


def _parse_bool(value: str | None, default: bool = True) -> bool:
    """Parse a boolean environment value, falling back to ``default``."""
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUTHY


def _parse_policy(value: str | None) -> ErrorPolicy:
    """Parse an error policy name, falling back to ``raise``."""
    if value is None or not value.strip():
        return ErrorPolicy.RAISE
    try:
        return ErrorPolicy(value.strip().lower())
    except ValueError:
        logger.warning(
            "Ignoring unknown QOPS_ERROR_POLICY %r, using %r",
            value,
            ErrorPolicy.RAISE.value,
        )
        return ErrorPolicy.RAISE


def load_config() -> Config:
    """
    Build a configuration from environment variables.

    Returns
    -------
    Config
        Fresh configuration instance.
    """
    return Config(
        error_policy=_parse_policy(os.environ.get("QOPS_ERROR_POLICY")),
        gate_fallback=_parse_bool(os.environ.get("QOPS_GATE_FALLBACK")),
    )


_config: Config | None = None
_config_lock = threading.Lock()


def get_config() -> Config:
    """Return the cached configuration, loading it on first use."""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = load_config()
    return _config


def set_config(config: Config) -> None:
    """Replace the cached configuration."""
    global _config
    with _config_lock:
        _config = config


def reset_config() -> None:
    """Clear the cached configuration so it is reloaded on next access."""
    global _config
    with _config_lock:
        _config = None
