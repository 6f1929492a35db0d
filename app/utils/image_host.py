import hashlib
import logging
import time
from io import BytesIO
from typing import Any, Dict, Optional

import requests
from PIL import Image, ImageOps, UnidentifiedImageError

from utils.config import settings
from utils.exceptions import AppError, ServiceUnavailableError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_TYPES = {
    "image/png": "PNG",
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/webp": "WEBP",
}
MAX_BYTES = 5 * 1024 * 1024
MAX_DIM = 4096
UPLOAD_FOLDER = "restaurant-menu"


def prepare_image(contents: bytes, content_type: Optional[str]) -> bytes:
    """Check type, size and dimensions, then re-encode without EXIF data."""
    if content_type not in ALLOWED_TYPES:
        raise AppError(
            "Only JPEG, PNG and WEBP images are allowed", status_code=415, code="UNSUPPORTED_MEDIA_TYPE"
        )
    if len(contents) > MAX_BYTES:
        raise AppError("Image must be 5MB or smaller", status_code=413, code="FILE_TOO_LARGE")

    try:
        img = Image.open(BytesIO(contents))
        img.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise ValidationError("Invalid image file") from exc

    if img.width > MAX_DIM or img.height > MAX_DIM:
        raise ValidationError(f"Image dimensions must not exceed {MAX_DIM}x{MAX_DIM}")

    img.info.pop("exif", None)
    img = ImageOps.exif_transpose(img)
    fmt = ALLOWED_TYPES[content_type]
    save_kwargs: Dict[str, Any] = {"format": fmt}
    if fmt == "JPEG":
        if img.mode not in ("RGB", "L"):
            img = img.convert("RGB")
        save_kwargs.update({"quality": 85, "optimize": True})
    elif fmt == "PNG":
        save_kwargs.update({"optimize": True})
    else:
        save_kwargs.update({"quality": 80})

    out = BytesIO()
    img.save(out, **save_kwargs)
    return out.getvalue()


class CloudinaryClient:
    BASE_URL = "https://api.cloudinary.com/v1_1"

    def __init__(
        self,
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        timeout: float = 30.0,
    ) -> None:
        self.cloud_name = cloud_name or settings.CLOUDINARY_CLOUD_NAME
        self.api_key = api_key or settings.CLOUDINARY_API_KEY
        self.api_secret = api_secret or settings.CLOUDINARY_API_SECRET
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def sign(self, params: Dict[str, Any]) -> str:
        # sha1 over the sorted "key=value" pairs followed by the api secret
        to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
        return hashlib.sha1(f"{to_sign}{self.api_secret}".encode("utf-8")).hexdigest()

    def upload(self, data: bytes, filename: str, content_type: str, folder: str = UPLOAD_FOLDER) -> str:
        """Upload ``data`` and return the hosted image's HTTPS URL."""
        if not self.configured:
            raise ServiceUnavailableError("Image upload is not configured")

        params = {"folder": folder, "timestamp": int(time.time())}
        form = dict(params, api_key=self.api_key, signature=self.sign(params))
        url = f"{self.BASE_URL}/{self.cloud_name}/image/upload"
        try:
            resp = requests.post(
                url,
                data=form,
                files={"file": (filename or "upload", data, content_type)},
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            logger.error("image upload failed: %s", exc)
            raise ServiceUnavailableError("Image upload failed") from exc

        secure_url = resp.json().get("secure_url")
        if not secure_url:
            raise ServiceUnavailableError("Image upload failed")
        return secure_url


def get_image_host() -> CloudinaryClient:
    return CloudinaryClient()
