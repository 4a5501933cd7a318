"""JSON response class using orjson serialization.

``ORJSONResponse`` is the default response class of the application and
the class every outcome method returns. Envelope models are dumped with
their wire aliases (``x-trans-id``, ``response-time``); payload values that
orjson does not know natively (nested Pydantic models, sets) go through
``_default``.
"""

from typing import Any

import orjson
from fastapi.responses import JSONResponse
from pydantic import BaseModel


def _default(value: Any) -> Any:  # noqa: ANN401 - orjson fallback hook
    """Serialize values orjson does not handle natively.

    Raises:
        TypeError: If the value has no JSON representation.
    """
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, set | frozenset):
        return list(value)
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


class ORJSONResponse(JSONResponse):
    """FastAPI Response class using orjson for JSON serialization.

    Attributes:
        media_type: The media type for the response.
    """

    media_type = "application/json"

    def render(self, content: Any) -> bytes:  # noqa: ANN401 - accepts any JSON-serializable content
        """Render the content as JSON using orjson.

        Args:
            content: The content to serialize to JSON.

        Returns:
            bytes: The JSON-encoded bytes.
        """
        if isinstance(content, BaseModel):
            content = content.model_dump(by_alias=True)

        return orjson.dumps(content, default=_default, option=orjson.OPT_NON_STR_KEYS)
