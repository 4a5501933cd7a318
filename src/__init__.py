"""Envelope API - uniform response envelopes for FastAPI services.

Every response leaving the service carries a ``meta`` block (transaction
ids, language, source label, response time) and either a ``response``
payload or an ``exception`` list. Declarative guards reject requests with
missing parameters or headers before route logic runs.

Architecture Overview:
- **API Layer**: Responders, guards, middleware and exception handlers
- **Core Layer**: Outcomes, timing, request context, configuration and logging
"""
