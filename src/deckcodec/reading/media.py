# media.py
"""Extract embedded media from the package and resolve image references to inline data."""

from __future__ import annotations

import base64
import logging
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from types import MappingProxyType

from deckcodec.reading.package import MEDIA_PREFIX, PackageReader, target_filename

log = logging.getLogger("deckcodec")

# region mime types
MIME_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "svg": "image/svg+xml",
    "webp": "image/webp",
    "tiff": "image/tiff",
    "tif": "image/tiff",
}
DEFAULT_MIME_TYPE = "image/png"
# endregion


# region MediaAsset
@dataclass(frozen=True)
class MediaAsset:
    """One embedded file, inlined as a data URI."""

    filename: str
    mime_type: str
    data_uri: str


# Filename -> asset. Built once per import and never mutated afterwards.
MediaMap = Mapping[str, MediaAsset]
# endregion


# region mime_type_for
def mime_type_for(filename: str) -> str:
    """MIME type from the file extension; unknown extensions are treated as PNG."""
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return MIME_TYPES.get(ext, DEFAULT_MIME_TYPE)


# endregion


# region extract_media
def extract_media(reader: PackageReader, max_workers: int = 4) -> MediaMap:
    """
    Base64-encode every file under ppt/media/ and index it by filename.

    Files are encoded in parallel; the returned mapping is complete and read-only by the time
    this function returns, so slide parsing can start right after.
    """
    paths = reader.list_dir(MEDIA_PREFIX)
    if not paths:
        return MappingProxyType({})

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
        assets = list(executor.map(lambda p: _encode_asset(reader, p), paths))

    media = {asset.filename: asset for asset in assets if asset is not None}
    log.debug(f"Extracted {len(media)} media file(s) from the package.")
    return MappingProxyType(media)


def _encode_asset(reader: PackageReader, path: str) -> MediaAsset | None:
    data = reader.read(path)
    if data is None:
        return None
    filename = target_filename(path)
    mime_type = mime_type_for(filename)
    encoded = base64.b64encode(data).decode("ascii")
    return MediaAsset(
        filename=filename,
        mime_type=mime_type,
        data_uri=f"data:{mime_type};base64,{encoded}",
    )


# endregion


# region resolve_media
def resolve_media(
    rel_id: str | None, relationships: Mapping[str, str], media: MediaMap
) -> tuple[MediaAsset, str] | None:
    """
    Follow a relationship id to its media asset.

    Returns (asset, target path) or None when the id, the relationship or the media entry is
    missing. None means "skip this element", never a hard failure.
    """
    if not rel_id:
        return None
    target = relationships.get(rel_id)
    if not target:
        log.debug(f"No relationship found for {rel_id}.")
        return None
    asset = media.get(target_filename(target))
    if asset is None:
        log.debug(f"Relationship {rel_id} points at {target}, which is not in the media folder.")
        return None
    return asset, target


# endregion
