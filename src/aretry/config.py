r"""Building retry policies from plain configuration.

Picking a policy from an external criterion (a name, an environment
variable, a configuration file) is kept out of the executors. This
module provides the small lookup and parsing helpers for it.

Example:
    ```pycon
    >>> from aretry.config import PolicyRegistry, policy_from_mapping
    >>> policy = policy_from_mapping({"max_attempts": 4, "backoff": "exponential", "base_delay": 5})
    >>> [policy.wait_time(attempt) for attempt in (1, 2, 3)]
    [5.0, 10.0, 20.0]
    >>> registry = PolicyRegistry({"payments": policy})
    >>> registry.get("payments") is policy
    True

    ```
"""

from __future__ import annotations

__all__ = [
    "BACKOFF_NAMES",
    "DEFAULT_BASE_DELAY",
    "DEFAULT_MAX_ATTEMPTS",
    "FOREVER",
    "PolicyRegistry",
    "build_backoff",
    "policy_from_env",
    "policy_from_mapping",
]

import logging
import os
from typing import TYPE_CHECKING, Any

from aretry.backoff import (
    BaseBackoffStrategy,
    ConstantBackoff,
    ExponentialBackoff,
    FibonacciBackoff,
    LinearBackoff,
    NoBackoff,
)
from aretry.constants import DEFAULT_BASE_DELAY, DEFAULT_MAX_ATTEMPTS, FOREVER
from aretry.exceptions import PolicyError
from aretry.policy import RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

logger: logging.Logger = logging.getLogger(__name__)

BACKOFF_NAMES = ("none", "fixed", "constant", "linear", "exponential", "fibonacci")

_POLICY_KEYS = frozenset(
    {
        "max_attempts",
        "backoff",
        "delay",
        "base_delay",
        "max_delay",
        "jitter_factor",
        "max_wait_time",
    }
)

_FLOAT_KEYS = ("delay", "base_delay", "max_delay", "jitter_factor", "max_wait_time")


def build_backoff(
    name: str,
    delay: float | None = None,
    base_delay: float | None = None,
    max_delay: float | None = None,
) -> BaseBackoffStrategy:
    """Create a backoff strategy from its name.

    Args:
        name: One of ``BACKOFF_NAMES`` (case insensitive).
        delay: The delay of the fixed strategy. ``base_delay`` is used
            when it is not given.
        base_delay: The base delay of the linear, exponential and
            Fibonacci strategies.
        max_delay: Optional cap of the linear, exponential and Fibonacci
            strategies.

    Returns:
        The backoff strategy.

    Raises:
        PolicyError: If the name is unknown or a parameter is invalid.
    """
    key = name.strip().lower()
    if key == "none":
        return NoBackoff()
    if key in {"fixed", "constant"}:
        value = delay if delay is not None else base_delay
        return ConstantBackoff(delay=1.0 if value is None else value)
    kwargs: dict[str, Any] = {"max_delay": max_delay}
    if base_delay is not None:
        kwargs["base_delay"] = base_delay
    if key == "linear":
        return LinearBackoff(**kwargs)
    if key == "exponential":
        return ExponentialBackoff(**kwargs)
    if key == "fibonacci":
        return FibonacciBackoff(**kwargs)
    msg = f"unknown backoff {name!r}, expected one of {', '.join(BACKOFF_NAMES)}"
    raise PolicyError(msg)


def _parse_max_attempts(value: Any) -> int | None:
    if value is None:
        return DEFAULT_MAX_ATTEMPTS
    if isinstance(value, str):
        if value.strip().lower() == FOREVER:
            return None
        try:
            return int(value)
        except ValueError:
            msg = f"max_attempts must be an integer or {FOREVER!r}, got {value!r}"
            raise PolicyError(msg) from None
    return value


def _parse_float(key: str, value: Any) -> float | None:
    if value is None or isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        msg = f"{key} must be a number, got {value!r}"
        raise PolicyError(msg) from None


def policy_from_mapping(mapping: Mapping[str, Any]) -> RetryPolicy:
    """Create a retry policy from plain data.

    Args:
        mapping: A mapping with any of the keys ``max_attempts``,
            ``backoff``, ``delay``, ``base_delay``, ``max_delay``,
            ``jitter_factor`` and ``max_wait_time``. Numbers may be given
            as strings. ``max_attempts`` may be ``"forever"``. The
            default backoff is exponential.

    Returns:
        The validated retry policy.

    Raises:
        PolicyError: If a key is unknown or a value is invalid.
    """
    unknown = set(mapping) - _POLICY_KEYS
    if unknown:
        msg = f"unknown retry policy option(s): {', '.join(sorted(unknown))}"
        raise PolicyError(msg)

    values = {key: _parse_float(key, mapping.get(key)) for key in _FLOAT_KEYS}
    backoff = build_backoff(
        str(mapping.get("backoff", "exponential")),
        delay=values["delay"],
        base_delay=values["base_delay"],
        max_delay=values["max_delay"],
    )
    return RetryPolicy(
        max_attempts=_parse_max_attempts(mapping.get("max_attempts")),
        backoff=backoff,
        jitter_factor=values["jitter_factor"] or 0.0,
        max_wait_time=values["max_wait_time"],
    )


def policy_from_env(
    prefix: str = "ARETRY_", environ: Mapping[str, str] | None = None
) -> RetryPolicy:
    """Create a retry policy from environment variables.

    The variables are the upper-cased policy options with the prefix,
    for example ``ARETRY_MAX_ATTEMPTS=5`` and ``ARETRY_BACKOFF=linear``.
    Unset variables keep their default value.

    Args:
        prefix: The prefix of the variable names.
        environ: The environment to read. Defaults to ``os.environ``.

    Returns:
        The validated retry policy.

    Raises:
        PolicyError: If a value is invalid.

    Example:
        ```pycon
        >>> from aretry.config import policy_from_env
        >>> env = {"ARETRY_MAX_ATTEMPTS": "5", "ARETRY_BACKOFF": "fixed", "ARETRY_DELAY": "2"}
        >>> policy = policy_from_env(environ=env)
        >>> policy.max_attempts, policy.wait_time(1)
        (5, 2.0)

        ```
    """
    environ = os.environ if environ is None else environ
    mapping = {}
    for key in _POLICY_KEYS:
        value = environ.get(f"{prefix}{key.upper()}")
        if value is not None and value.strip():
            mapping[key] = value.strip()
    logger.debug(f"Loaded retry policy options from environment: {sorted(mapping)}")
    return policy_from_mapping(mapping)


class PolicyRegistry:
    """Lookup table from names to retry policies.

    Args:
        policies: Optional initial policies by name.

    Example:
        ```pycon
        >>> from aretry import RetryPolicy
        >>> from aretry.config import PolicyRegistry
        >>> registry = PolicyRegistry()
        >>> registry.register("once", RetryPolicy.no_retry())
        >>> "once" in registry
        True
        >>> registry.get("once").max_attempts
        1
        >>> registry.names()
        ['once']

        ```
    """

    def __init__(self, policies: Mapping[str, RetryPolicy] | None = None) -> None:
        self._policies: dict[str, RetryPolicy] = {}
        for name, policy in (policies or {}).items():
            self.register(name, policy)

    def __contains__(self, name: object) -> bool:
        return name in self._policies

    def __iter__(self) -> Iterator[str]:
        return iter(self._policies)

    def __len__(self) -> int:
        return len(self._policies)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._policies!r})"

    def register(self, name: str, policy: RetryPolicy, exist_ok: bool = False) -> None:
        """Register a policy under a name.

        Args:
            name: The policy name.
            policy: The retry policy.
            exist_ok: If ``False``, registering an existing name raises
                an error. Otherwise the previous policy is replaced.

        Raises:
            TypeError: If ``policy`` is not a ``RetryPolicy``.
            KeyError: If the name is already registered and
                ``exist_ok`` is ``False``.
        """
        if not isinstance(policy, RetryPolicy):
            msg = f"policy must be a RetryPolicy, got {policy!r}"
            raise TypeError(msg)
        if name in self._policies and not exist_ok:
            msg = f"a retry policy is already registered under {name!r}"
            raise KeyError(msg)
        self._policies[name] = policy

    def get(self, name: str, default: RetryPolicy | None = None) -> RetryPolicy:
        """Return the policy registered under a name.

        Args:
            name: The policy name.
            default: Policy returned when the name is unknown.

        Returns:
            The registered policy, or ``default``.

        Raises:
            KeyError: If the name is unknown and no default is given.
        """
        if name in self._policies:
            return self._policies[name]
        if default is not None:
            return default
        msg = f"unknown retry policy {name!r}, known policies: {', '.join(self.names()) or 'none'}"
        raise KeyError(msg)

    def names(self) -> list[str]:
        """Return the registered names, sorted."""
        return sorted(self._policies)
