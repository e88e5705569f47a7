"""
Admin product image handling.

Accept phase: picked/dropped files -> downsampled JPEG previews
(data:image/jpeg;base64,...) appended to the form's preview list.

Submit phase: previews -> objects in storage -> public URLs for
Product.images. URLs already stored on the product pass through untouched.
"""

import base64
import binascii
import logging
import secrets
import time
from io import BytesIO
from typing import Callable, Iterable, List, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from object_storage import StorageError

logger = logging.getLogger(__name__)

MAX_WIDTH = 800
JPEG_QUALITY = 80
DEFAULT_MAX_IMAGES = 10

PREVIEW_PREFIX = "data:image/jpeg;base64,"


class ImageUploadError(Exception):
    """Raised when a submission ends up with no uploaded images."""
    pass


# ----------------------------
# ACCEPT PHASE
# ----------------------------
def _content_type(file) -> str:
    return (getattr(file, "mimetype", None) or getattr(file, "content_type", None) or "").lower()


def _stream(file):
    return getattr(file, "stream", file)


def scaled_size(width: int, height: int, max_width: int = MAX_WIDTH) -> Tuple[int, int]:
    """Target size: width capped at max_width, aspect ratio kept, never upscaled."""
    if width <= max_width:
        return width, height
    return max_width, max(1, round(height * max_width / width))


def encode_preview(stream) -> str:
    """Decode an image, cap its width and re-encode it as a JPEG data URI."""
    with Image.open(stream) as img:
        img.load()
        if img.mode != "RGB":
            img = img.convert("RGB")

        size = scaled_size(*img.size)
        if size != img.size:
            img = img.resize(size, Image.LANCZOS)

        buf = BytesIO()
        img.save(buf, "JPEG", quality=JPEG_QUALITY, optimize=True)

    return PREVIEW_PREFIX + base64.b64encode(buf.getvalue()).decode("ascii")


def accept_files(files: Iterable, current_count: int = 0, max_images: int = DEFAULT_MAX_IMAGES) -> List[str]:
    """
    Encode files into previews, in input order.

    Non-image content types are skipped silently; once current_count plus
    the accepted previews reach max_images the rest are ignored. Files that
    claim to be images but fail to decode are logged and skipped.
    """
    previews = []
    for file in files:
        if current_count + len(previews) >= max_images:
            break

        if not _content_type(file).startswith("image/"):
            continue

        try:
            previews.append(encode_preview(_stream(file)))
        except (UnidentifiedImageError, OSError, ValueError) as e:
            logger.warning("Could not decode %s: %s", getattr(file, "filename", "upload"), e)

    return previews


class PreviewList:
    """Preview list held by an admin product form."""

    def __init__(self, previews: Optional[List[str]] = None, max_images: int = DEFAULT_MAX_IMAGES,
                 on_change: Optional[Callable[[List[str]], None]] = None):
        self.previews = list(previews or [])
        self.max_images = max_images
        self.on_change = on_change

    def __len__(self):
        return len(self.previews)

    @property
    def remaining(self) -> int:
        return max(0, self.max_images - len(self.previews))

    def _changed(self):
        if self.on_change:
            self.on_change(list(self.previews))

    def add_files(self, files: Iterable) -> List[str]:
        """Append accepted previews and return the ones added."""
        added = accept_files(files, len(self.previews), self.max_images)
        if added:
            self.previews.extend(added)
            self._changed()
        return added

    def remove(self, index: int) -> str:
        """Remove one preview; later entries shift down by one."""
        if index < 0 or index >= len(self.previews):
            raise IndexError(f"No preview at index {index}")
        removed = self.previews.pop(index)
        self._changed()
        return removed


# ----------------------------
# SUBMIT PHASE
# ----------------------------
def is_remote_url(value: str) -> bool:
    return isinstance(value, str) and value.startswith(("http://", "https://", "/"))


def is_embedded_preview(value: str) -> bool:
    return isinstance(value, str) and value.startswith("data:image/") and ";base64," in value


def decode_preview(data_uri: str) -> Tuple[bytes, str]:
    """data:image/...;base64,... -> (bytes, content type)"""
    if not is_embedded_preview(data_uri):
        raise ValueError("Not an embedded image preview")

    header, payload = data_uri.split(",", 1)
    content_type = header[len("data:"):].split(";", 1)[0]
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e
    if not data:
        raise ValueError("Empty image payload")
    return data, content_type


def generate_object_name(index: int = 0) -> str:
    """image-<epoch millis>-<random>-<index>.jpg"""
    return f"image-{int(time.time() * 1000)}-{secrets.token_hex(4)}-{index}.jpg"


def upload_previews(previews: Iterable[str], storage, name_factory=generate_object_name) -> List[str]:
    """
    Upload embedded previews one at a time and return URLs in input order.

    Existing URLs are kept as-is. An entry that cannot be decoded or stored
    is logged and left out; the remaining uploads still run.
    """
    urls = []
    for index, entry in enumerate(previews):
        if is_remote_url(entry):
            urls.append(entry)
            continue

        try:
            data, content_type = decode_preview(entry)
            urls.append(storage.put(name_factory(index), data, content_type))
        except (ValueError, StorageError) as e:
            logger.error("Image %d upload failed: %s", index, e)

    return urls


def upload_for_submission(previews: List[str], storage) -> List[str]:
    """upload_previews for a form submit; aborts when nothing made it through."""
    urls = upload_previews(previews, storage)
    if not urls:
        raise ImageUploadError("Image upload failed")
    if len(urls) < len(previews):
        logger.warning("%d of %d images were not uploaded", len(previews) - len(urls), len(previews))
    return urls
