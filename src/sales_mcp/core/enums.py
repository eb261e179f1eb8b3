"""Core enumerations used across the package."""

from __future__ import annotations

from enum import Enum


class GroupKey(str, Enum):
    """Record fields revenue can be grouped by."""

    REGION = "region"
    PRODUCT = "product"


class InvocationState(str, Enum):
    """Lifecycle of a single tool call or resource read.

    VALIDATING -> EXECUTING -> SUCCEEDED | FAILED. Requests naming an
    unregistered tool or resource go straight from VALIDATING to FAILED.
    """

    VALIDATING = "validating"
    EXECUTING = "executing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


__all__ = ["GroupKey", "InvocationState"]
