"""Recipe image compression and object-storage upload."""

import base64
import binascii
import io
import logging
import uuid

import httpx
from PIL import Image, UnidentifiedImageError

from meal_planner.config import Settings, get_settings

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "image/jpeg"


def compress_image(
    image_data: bytes, max_width: int = 1200, quality: int = 70
) -> tuple[bytes, str]:
    """Downscale an image to at most max_width and re-encode it as JPEG.

    Input Pillow cannot decode is returned unchanged with a generic content type.

    Returns:
        (image bytes, content type)
    """
    try:
        img = Image.open(io.BytesIO(image_data))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"Could not decode image for compression: {e}")
        return image_data, DEFAULT_CONTENT_TYPE

    if img.width > max_width:
        new_height = round(img.height * max_width / img.width)
        img = img.resize((max_width, new_height), Image.LANCZOS)
    if img.mode != "RGB":
        img = img.convert("RGB")

    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=quality, optimize=True)
    return buf.getvalue(), DEFAULT_CONTENT_TYPE


def is_data_url(value: str) -> bool:
    return value.startswith("data:")


def decode_data_url(data_url: str) -> tuple[bytes, str]:
    """Split a base64 data URL into raw bytes and its content type."""
    header, _, payload = data_url.partition(",")
    if not header.startswith("data:") or ";base64" not in header:
        raise ValueError("Not a base64 data URL")
    content_type = header[len("data:") :].split(";")[0] or DEFAULT_CONTENT_TYPE
    try:
        return base64.b64decode(payload, validate=True), content_type
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 image data: {e}") from e


def encode_data_url(image_data: bytes, content_type: str) -> str:
    encoded = base64.b64encode(image_data).decode("utf-8")
    return f"data:{content_type};base64,{encoded}"


class ObjectStorageClient:
    """Uploads recipe images to an HTTP object-storage bucket."""

    def __init__(
        self,
        base_url: str | None,
        api_key: str | None,
        bucket: str = "images",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/") if base_url else None
        self.api_key = api_key
        self.bucket = bucket
        self.timeout = 30.0
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ObjectStorageClient":
        settings = settings or get_settings()
        return cls(settings.storage_url, settings.storage_api_key, settings.images_bucket)

    @property
    def is_configured(self) -> bool:
        """Check if a storage endpoint and key are available."""
        return bool(self.base_url and self.api_key)

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{path}"

    def upload_recipe_image(self, image_data: bytes, content_type: str) -> str:
        """Upload an image under recipes/<uuid>.jpg and return its public URL.

        Returns "" when storage is not configured or the upload fails, so recipe
        creation can continue without an image.
        """
        if not self.is_configured:
            logger.info("Image upload skipped: object storage not configured")
            return ""

        path = f"recipes/{uuid.uuid4()}.jpg"
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(
                    f"{self.base_url}/storage/v1/object/{self.bucket}/{path}",
                    content=image_data,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "apikey": self.api_key,
                        "Content-Type": content_type or DEFAULT_CONTENT_TYPE,
                        "x-upsert": "false",
                    },
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Image upload skipped: {e}")
            return ""

        return self.public_url(path)
