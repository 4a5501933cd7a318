"""Core application constants."""

# Time constants
NANOSECONDS_PER_MILLISECOND = 1_000_000

# Correlation headers consumed from inbound requests
TRANS_ID_HEADER = "x-trans-id"
TRANS_PARENT_ID_HEADER = "x-trans-parent-id"
REQUEST_LANGUAGE_HEADER = "x-request-or-lang"

DEFAULT_LANGUAGE = "en"

# Guard messages
MISSING_PARAMETER_MESSAGE = "Missing required parameter: {name}"
MISSING_HEADER_MESSAGE = "Missing required header parameter: {name}"

# Security and redaction
REDACTED = "[REDACTED]"
