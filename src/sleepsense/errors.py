"""Error kinds raised by the scoring pipeline and its adapters."""

from __future__ import annotations


class SleepSenseError(Exception):
    """Base class for all sleepsense errors."""


class Unauthorized(SleepSenseError):
    """Missing or wrong shared-secret credential."""


class InvalidInput(SleepSenseError):
    """Request body is absent, empty or malformed."""


class InvalidTimestamp(SleepSenseError):
    """``custom_timestamp`` could not be parsed as ISO-8601."""


class StorageFailure(SleepSenseError):
    """The record store could not persist a record."""
