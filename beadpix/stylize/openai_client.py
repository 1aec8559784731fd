from __future__ import annotations

import base64
import binascii
import logging
from typing import Optional

import httpx

from .. import settings
from ..core.errors import StylizeError

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = (
    "Turn this photo into a cute, clean cartoon with bold, well defined outlines. "
    "Keep the subject's features and the composition, and do not add any text."
)


def _error_message(response: httpx.Response) -> str:
    message = f"Stylization failed with HTTP {response.status_code}"
    try:
        payload = response.json()
    except ValueError:
        return message
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return message


async def stylize_image(
    image: bytes,
    *,
    api_key: Optional[str] = None,
    prompt: Optional[str] = None,
    filename: str = "image.png",
    content_type: str = "image/png",
    client: Optional[httpx.AsyncClient] = None,
) -> bytes:
    """
    Send ``image`` to an OpenAI-compatible image edit endpoint and return the
    stylized PNG bytes. The result is an ordinary image for the bead pipeline.
    """
    if not image:
        raise StylizeError("No image to stylize")
    api_key = api_key or settings.OPENAI_API_KEY
    if not api_key:
        raise StylizeError("An OpenAI API key is required for stylization")

    data = {
        "model": settings.STYLIZE_MODEL,
        "prompt": prompt or DEFAULT_PROMPT,
        "size": "1024x1024",
    }
    files = {"image": (filename, image, content_type)}
    headers = {"Authorization": f"Bearer {api_key}"}

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=settings.STYLIZE_TIMEOUT)
    try:
        response = await client.post(
            settings.OPENAI_IMAGE_EDIT_URL, data=data, files=files, headers=headers
        )
    except httpx.HTTPError as exc:
        raise StylizeError(f"Stylization request failed: {exc}") from exc
    finally:
        if owns_client:
            await client.aclose()

    if response.is_error:
        raise StylizeError(_error_message(response))

    try:
        result = response.json()
    except ValueError as exc:
        raise StylizeError("Stylization service returned invalid JSON") from exc

    items = result.get("data") if isinstance(result, dict) else None
    first = items[0] if items else None
    b64 = first.get("b64_json") if isinstance(first, dict) else None
    if not b64:
        raise StylizeError("Stylization service returned no image data")

    try:
        decoded = base64.b64decode(b64, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise StylizeError("Stylization service returned malformed image data") from exc

    logger.info("Stylized image: %d bytes in, %d bytes out", len(image), len(decoded))
    return decoded
