"""OpenAI wrapper for handwriting extraction.

Images of one batch are sent one at a time; the first failing call aborts the
batch and nothing extracted so far is returned.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Tuple

from handwriting.exceptions import (
    ConfigurationError,
    ExtractionError,
    PaymentRequiredError,
    RateLimitedError,
    UpstreamError,
)
from handwriting.models import ExtractionResult

try:
    import openai
    from openai import OpenAI
except Exception:
    openai = None
    OpenAI = None

logger = logging.getLogger(__name__)

EXTRACTION_PROMPT = (
    "Extract all handwritten text from this image. Return ONLY the text content, "
    "nothing else. Preserve line breaks and paragraph structure."
)
BATCH_SEPARATOR = "\n\n"


def client_ready(api_key: str) -> Tuple[bool, str]:
    if OpenAI is None:
        return False, "OpenAI SDK not installed"
    if not (api_key or "").strip():
        return False, "OPENAI_API_KEY is missing"
    return True, ""


def get_client(api_key: str, base_url: Optional[str] = None, timeout: float = 60):
    ok, msg = client_ready(api_key)
    if not ok:
        raise ConfigurationError(msg)
    # Retries are left to the user.
    return OpenAI(
        api_key=api_key.strip(),
        base_url=(base_url or "").strip() or None,
        timeout=timeout,
        max_retries=0,
    )


def extraction_messages(image: str) -> List[dict]:
    return [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": EXTRACTION_PROMPT},
                {"type": "image_url", "image_url": {"url": image}},
            ],
        }
    ]


def _translate_status(status: Optional[int]) -> Exception:
    if status == 429:
        return RateLimitedError()
    if status == 402:
        return PaymentRequiredError()
    return UpstreamError(f"AI gateway error: {status}", upstream_status=status)


def extract_image_text(client: Any, model: str, image: str) -> str:
    """Run one image through the model and return its text (may be empty)."""
    try:
        res = client.chat.completions.create(
            model=model,
            messages=extraction_messages(image),
        )
    except Exception as e:
        if openai is not None and isinstance(e, openai.APIStatusError):
            logger.error("AI gateway error: %s %s", e.status_code, e.message)
            raise _translate_status(e.status_code) from e
        if openai is not None and isinstance(e, openai.APIError):
            logger.error("AI gateway unreachable: %s: %s", type(e).__name__, e)
            raise UpstreamError(f"AI gateway error: {type(e).__name__}") from e
        raise

    choices = getattr(res, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    return getattr(message, "content", None) or ""


def extract_handwriting(client: Any, model: str, images: Sequence[str]) -> ExtractionResult:
    """Extract text from every image of a batch, strictly in order.

    Empty answers are skipped; the remaining texts are joined with a blank line.
    """
    logger.info("Processing %d handwriting images...", len(images))

    texts: List[str] = []
    for index, image in enumerate(images, start=1):
        logger.info("Processing image %d/%d", index, len(images))
        try:
            text = extract_image_text(client, model, image)
        except ExtractionError:
            logger.error("Extraction aborted at image %d/%d", index, len(images))
            raise
        if text:
            texts.append(text)
            logger.info("Extracted text from image %d: %s...", index, text[:50])

    combined = BATCH_SEPARATOR.join(texts)
    logger.info("Extracted %d characters from %d images", len(combined), len(images))
    return ExtractionResult(text=combined, image_count=len(images))
