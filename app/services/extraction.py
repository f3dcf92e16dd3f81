"""
Image reference extraction from chat-completion style responses.

The gateway does not return images in a stable shape across model backends,
so extraction is a chain of small extractors tried in a fixed order. Each
extractor receives the first choice's ``message`` dict and returns a
non-empty string or None.
"""

import logging
import re
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

DATA_URI_PATTERN = re.compile(r"data:image/[^;]+;base64,[A-Za-z0-9+/=]+")

IMAGE_CONTENT_TYPES = ("image_url", "image")


def _non_empty(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


def _url_of(entry: Any) -> Optional[str]:
    """Read ``entry["image_url"]["url"]``."""
    if not isinstance(entry, dict):
        return None
    image_url = entry.get("image_url")
    if isinstance(image_url, dict):
        return _non_empty(image_url.get("url"))
    return None


def from_images_list(message: dict) -> Optional[str]:
    """``message.images[0].image_url.url``"""
    images = message.get("images")
    if isinstance(images, list) and images:
        return _url_of(images[0])
    return None


def from_message_image_url(message: dict) -> Optional[str]:
    """``message.image_url.url``"""
    return _url_of(message)


def from_content_list(message: dict) -> Optional[str]:
    """
    First content entry tagged as an image.

    Two sub-shapes are accepted: ``{"type": ..., "image_url": {"url": ...}}``
    and ``{"type": ..., "url": ...}``.
    """
    content = message.get("content")
    if not isinstance(content, list):
        return None

    entry = next(
        (
            part for part in content
            if isinstance(part, dict) and part.get("type") in IMAGE_CONTENT_TYPES
        ),
        None,
    )
    if entry is None:
        return None

    return _url_of(entry) or _non_empty(entry.get("url"))


def from_content_string(message: dict) -> Optional[str]:
    """First inline base64 image data URI inside string content."""
    content = message.get("content")
    if not isinstance(content, str):
        return None
    match = DATA_URI_PATTERN.search(content)
    return match.group(0) if match else None


EXTRACTORS: tuple[Callable[[dict], Optional[str]], ...] = (
    from_images_list,
    from_message_image_url,
    from_content_list,
    from_content_string,
)


def first_message(response: Any) -> dict:
    """Return ``choices[0].message`` or an empty dict when absent."""
    if not isinstance(response, dict):
        return {}
    choices = response.get("choices")
    if not isinstance(choices, list) or not choices:
        return {}
    choice = choices[0]
    if not isinstance(choice, dict):
        return {}
    message = choice.get("message")
    return message if isinstance(message, dict) else {}


def extract_image_reference(response: Any) -> Optional[str]:
    """Try every extractor in order and return the first reference found."""
    message = first_message(response)
    for extractor in EXTRACTORS:
        reference = extractor(message)
        if reference:
            logger.info("Found image via %s", extractor.__name__)
            return reference
    return None


def extract_text_content(response: Any) -> str:
    """Message content when it is a plain string, otherwise an empty string."""
    content = first_message(response).get("content")
    return content if isinstance(content, str) else ""


def describe_structure(response: Any) -> dict:
    """Key structure of a response, for diagnostics when no image was found."""
    summary: dict[str, Any] = {
        "response_keys": sorted(response.keys()) if isinstance(response, dict) else type(response).__name__,
    }
    choices = response.get("choices") if isinstance(response, dict) else None
    choice = choices[0] if isinstance(choices, list) and choices else None
    summary["choice_keys"] = sorted(choice.keys()) if isinstance(choice, dict) else "no choices"
    message = first_message(response)
    summary["message_keys"] = sorted(message.keys()) if message else "no message"
    return summary
