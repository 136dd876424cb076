"""Application identifier generators.

The workflow receives its id source as a plain callable so tests can supply
deterministic ids and deployments can switch to UUIDs.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT
"""

import itertools
import secrets
import string
import uuid
from typing import Callable

IdGenerator = Callable[[], str]

_BASE36_ALPHABET = string.digits + string.ascii_uppercase
SHORT_ID_LENGTH = 9


def short_id() -> str:
    """Return a 9-character upper-case base36 id, e.g. ``'K3ZQ0T7AB'``."""
    return "".join(secrets.choice(_BASE36_ALPHABET) for _ in range(SHORT_ID_LENGTH))


def uuid_id() -> str:
    return str(uuid.uuid4())


def sequential_ids(prefix: str = "APP", start: int = 1) -> IdGenerator:
    """Build a generator yielding ``APP-0001``, ``APP-0002``, ..."""
    counter = itertools.count(start)
    return lambda: f"{prefix}-{next(counter):04d}"


def get_id_generator(strategy: str) -> IdGenerator:
    """Resolve an id strategy name (``short`` or ``uuid``) to a generator.

    Raises:
        ValueError: If the strategy is unknown.
    """
    strategies = {"short": short_id, "uuid": uuid_id}
    try:
        return strategies[strategy.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown id strategy {strategy!r}; expected one of: {', '.join(strategies)}"
        ) from None
