"""Core building blocks shared by the API layer.

- **outcomes**: Outcome enum (status table) and error-input normalization
- **timer**: Monotonic start tokens and elapsed milliseconds
- **context**: Request-scoped correlation context
- **fields**: Key/value presence checks over request data
- **exceptions**: Exceptions carrying outcomes to the exception handlers
- **config**: Centralized configuration with environment support
- **logging**: Structured logging with Loguru
- **types**: Type aliases for better code clarity
"""
