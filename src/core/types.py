"""Type aliases for dynamic data structures throughout the application.

This module centralizes type definitions for data that cannot be statically
typed, providing clear semantic meaning for these types. All types defined
here should be JSON-serializable to support logging and API responses.
"""

from typing import Any

# JSON-compatible type that represents any valid JSON value
# Used for envelope payloads and parsed request bodies
type JsonValue = (
    dict[str, "JsonValue"] | list["JsonValue"] | str | int | float | bool | None
)

# Context dictionary for logging additional information
# Values must be JSON-serializable for structured logging
type LogContext = dict[str, Any]  # JSON-serializable values

# Parameter or header names declared by a guard: one name or several
type RequiredNames = str | list[str] | tuple[str, ...] | set[str] | frozenset[str]
