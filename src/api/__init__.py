"""HTTP layer of the envelope API, built on FastAPI.

Key components:
- **responder**: Request-scoped ``Responder`` with the nine outcome methods
  and the ``app_response`` / ``get_responder`` dependencies
- **guards**: ``require_params`` and ``require_headers`` dependencies
- **middleware**: Request context, request logging and exception handlers
- **schemas**: Pydantic models of the response envelope
- **utils**: Envelope builder and the orjson response class
- **main**: Application factory
"""
