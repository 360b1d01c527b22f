# sanitize.py
"""Export-side validation of geometry and image sources."""

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from enum import Enum

from deckcodec.models import BaseElement
from deckcodec.units import pixels_to_inches
from deckcodec.writing.writer import Placement

log = logging.getLogger("deckcodec")

# region consts
# Smallest extent the format accepts, in inches
MIN_EXTENT_INCHES = 0.1
MIN_LINE_WIDTH_PT = 0.5

DATA_URI_PATTERN = re.compile(r"^data:image/[a-z]+;base64,(.+)$", re.IGNORECASE | re.DOTALL)
# endregion


# region placement
def has_valid_extent(element: BaseElement) -> bool:
    """Elements with no area are skipped outright."""
    return element.width > 0 and element.height > 0


def placement_for(element: BaseElement) -> Placement:
    """
    Element geometry in inches, clamped for the format.

    x/y are floored at 0 and width/height at MIN_EXTENT_INCHES. Nothing is clamped to the
    slide's far edges.
    """
    return Placement(
        x=max(0.0, pixels_to_inches(element.x)),
        y=max(0.0, pixels_to_inches(element.y)),
        width=max(MIN_EXTENT_INCHES, pixels_to_inches(element.width)),
        height=max(MIN_EXTENT_INCHES, pixels_to_inches(element.height)),
        rotation=element.rotation or 0,
    )


# endregion


# region image sources
class ImageSourceKind(Enum):
    DATA_URI = "data_uri"
    URL = "url"
    INVALID = "invalid"


@dataclass(frozen=True)
class ImageSource:
    kind: ImageSourceKind
    # Base64 payload for data URIs, the URL for remote images
    value: str = ""


def classify_image_source(src: str | None) -> ImageSource:
    """Accept only base64 image data URIs and http(s) URLs."""
    if not src:
        return ImageSource(ImageSourceKind.INVALID)
    if src.startswith("data:image/"):
        match = DATA_URI_PATTERN.match(src)
        if match and match.group(1):
            return ImageSource(ImageSourceKind.DATA_URI, match.group(1))
        return ImageSource(ImageSourceKind.INVALID)
    if src.startswith("http://") or src.startswith("https://"):
        return ImageSource(ImageSourceKind.URL, src)
    return ImageSource(ImageSourceKind.INVALID)


def decode_data_uri_payload(payload: str) -> bytes:
    """Raises ValueError when the payload isn't valid base64."""
    try:
        return base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Image data is not valid base64: {e}") from e


# endregion
