"""Validation configuration constants.

This module centralizes severity rules for the dataset quality checks.

Severity Levels:
    - "error": The affected rows cannot be used; the loader drops them
    - "warning": Worth a review but may be legitimate (e.g. refunds)

Severities are keyed by check id and then by column name.
"""

from __future__ import annotations

# Maximum number of per-row messages a check reports; the rest are summarized.
MAX_MESSAGES_PER_CHECK = 20

# Empty identifiers - the loader drops rows missing any of these
EMPTY_IDENTIFIERS_SEVERITY = {
    "date": "error",
    "region": "error",
    "product": "error",
}

# Revenue that is empty or not a finite number - row is dropped on load
INVALID_REVENUE_SEVERITY = {
    "revenue": "error",
}

# Negative revenue - usually returns or corrections
NEGATIVE_REVENUE_SEVERITY = {
    "revenue": "warning",
}

_SEVERITY_MAP = {
    "empty_identifiers": EMPTY_IDENTIFIERS_SEVERITY,
    "invalid_revenue": INVALID_REVENUE_SEVERITY,
    "negative_revenue": NEGATIVE_REVENUE_SEVERITY,
}


def get_severity(check_id: str, column: str) -> str:
    """Get severity level for a specific check and column.

    Raises:
        ValueError: If check_id is unknown or the column is not configured for it.

    Examples:
        >>> get_severity("empty_identifiers", "date")
        'error'
        >>> get_severity("negative_revenue", "revenue")
        'warning'
        >>> get_severity("invalid_revenue", "revenue")
        'error'
    """
    if check_id not in _SEVERITY_MAP:
        raise ValueError(f"Unknown check_id: {check_id}")

    severity_config = _SEVERITY_MAP[check_id]

    if column not in severity_config:
        raise ValueError(
            f"Invalid column '{column}' for check '{check_id}'. "
            f"Valid columns: {', '.join(severity_config)}"
        )

    return severity_config[column]


def cap_messages(messages: list) -> list:
    """Trim a message list to MAX_MESSAGES_PER_CHECK, noting how many were dropped."""
    if len(messages) <= MAX_MESSAGES_PER_CHECK:
        return messages
    extra = len(messages) - MAX_MESSAGES_PER_CHECK
    return messages[:MAX_MESSAGES_PER_CHECK] + [f"... and {extra} more"]
