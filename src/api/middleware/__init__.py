"""Middleware and exception handlers for the envelope pipeline.

- **RequestContextMiddleware**: Starts the request timer and captures the
  correlation headers into a ``RequestContext``
- **RequestLoggingMiddleware**: Logs requests with status and duration
- **error_handler**: Translates exceptions into error envelopes

Middleware are executed in reverse order of registration; the request
context middleware is registered last so it runs first.
"""
