"""OpenAI-compatible chat client that asks a vision model for a filename."""

import asyncio
from typing import Any, Final

import httpx
from pydantic import BaseModel, ValidationError

from image_namer.errors import ApiError, EmptyResponseError, RequestTimeoutError
from image_namer.logging import get_logger
from image_namer.models import NamingConfig
from image_namer.naming.sanitize import sanitize_filename

logger = get_logger(__name__)

# A filename needs a handful of tokens; the cap bounds cost if the model rambles.
MAX_RESPONSE_TOKENS: Final = 50
IMAGE_DETAIL: Final = "low"

_ERROR_BODY_LIMIT: Final = 500


class _Message(BaseModel):
    content: str | None = None


class _Choice(BaseModel):
    message: _Message | None = None


class ChatCompletionResponse(BaseModel):
    """The subset of a chat-completions response the client reads."""

    choices: list[_Choice] = []

    def first_content(self) -> str:
        """Stripped text of the first choice, or ``""`` when absent."""
        if not self.choices or self.choices[0].message is None:
            return ""
        return (self.choices[0].message.content or "").strip()


def build_request_payload(data_uri: str, config: NamingConfig) -> dict[str, Any]:
    """Chat request with the prompt and a low-detail image reference."""
    return {
        "model": config.model,
        "messages": [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": config.prompt},
                    {
                        "type": "image_url",
                        "image_url": {"url": data_uri, "detail": IMAGE_DETAIL},
                    },
                ],
            }
        ],
        "max_tokens": MAX_RESPONSE_TOKENS,
    }


async def request_filename(
    data_uri: str, config: NamingConfig, *, client: httpx.AsyncClient | None = None
) -> str:
    """Ask the naming API for a filename for one image.

    Args:
        data_uri: ``data:<type>;base64,...`` image reference.
        config: Endpoint, credentials, model, prompt and timeout.
        client: Shared HTTP client. When omitted a client is created and closed
            around this single request.

    Returns:
        A sanitized, non-empty filename slug.

    Raises:
        RequestTimeoutError: No answer within ``config.timeout``.
        ApiError: Non-2xx status, transport failure, or unparseable body.
        EmptyResponseError: No usable text in an otherwise valid response.
    """
    if client is not None:
        return await _request_with_client(client, data_uri, config)

    async with httpx.AsyncClient(timeout=config.timeout_seconds) as c:
        return await _request_with_client(c, data_uri, config)


async def _request_with_client(
    client: httpx.AsyncClient, data_uri: str, config: NamingConfig
) -> str:
    payload = build_request_payload(data_uri, config)
    headers: dict[str, str] = {}
    api_key = config.api_key.get_secret_value()
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    logger.debug(
        "ai_naming_request",
        api_url=config.api_url,
        model=config.model,
        image_uri_length=len(data_uri),
        timeout_s=config.timeout_seconds,
    )

    # The deadline cancels the in-flight POST; httpx drops the connection on cancel.
    try:
        async with asyncio.timeout(config.timeout_seconds):
            response = await client.post(
                config.api_url,
                json=payload,
                headers=headers,
                timeout=config.timeout_seconds,
            )
    except (TimeoutError, httpx.TimeoutException) as e:
        logger.warning("ai_naming_timeout", timeout_s=config.timeout_seconds)
        raise RequestTimeoutError(config.timeout_seconds) from e
    except httpx.HTTPError as e:
        logger.warning("ai_naming_transport_error", error=str(e))
        raise ApiError(None, str(e)) from e

    logger.debug("ai_naming_response", status=response.status_code)
    if not response.is_success:
        body = response.text[:_ERROR_BODY_LIMIT]
        logger.warning("ai_naming_api_error", status=response.status_code, body=body)
        raise ApiError(response.status_code, body)

    try:
        parsed = ChatCompletionResponse.model_validate_json(response.content)
    except ValidationError as e:
        logger.warning("ai_naming_unparseable_response", status=response.status_code)
        raise ApiError(
            response.status_code, f"invalid response body: {e.error_count()} errors"
        ) from e

    raw_name = parsed.first_content()
    if not raw_name:
        raise EmptyResponseError("AI API returned empty response")

    filename = sanitize_filename(raw_name)
    if not filename:
        raise EmptyResponseError(f"AI response {raw_name!r} has no usable filename characters")
    logger.debug("ai_naming_raw_response", raw=raw_name, filename=filename)
    return filename
