"""Random identifier helpers."""

import secrets
import string

ALPHANUMERIC = string.ascii_letters + string.digits


def random_alnum(length: int) -> str:
    """Return ``length`` characters drawn uniformly from [A-Za-z0-9].

    Uses the ``secrets`` module, so the output is suitable for
    unpredictable file names.

    Args:
        length: Number of characters to produce.

    Returns:
        Random alphanumeric string.

    Raises:
        ValueError: If length is not positive.
    """
    if length <= 0:
        msg = f"Length must be positive, got {length}"
        raise ValueError(msg)
    return "".join(secrets.choice(ALPHANUMERIC) for _ in range(length))
