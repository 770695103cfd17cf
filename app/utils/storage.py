import logging
import re
import shutil
import time
from pathlib import Path

from fastapi import UploadFile

from app.config import settings
from app.utils.exceptions import ValidationException

logger = logging.getLogger(__name__)


def _safe_name(filename: str | None) -> str:
    name = Path(filename or "image").name
    return re.sub(r"\s+", "-", name) or "image"


def check_image(file: UploadFile) -> None:
    """Only image/* uploads are accepted."""
    if not (file.content_type or "").startswith("image/"):
        raise ValidationException(f"{file.filename or 'File'} is not an image", field="images")


def save_upload(file: UploadFile, upload_dir: str | None = None) -> str:
    """
    Persist an uploaded image and return the URL it is served under
    (`<UPLOAD_URL_PREFIX>/<millis>-<name>`).
    """
    check_image(file)

    target_dir = Path(upload_dir or settings.UPLOAD_DIR)
    target_dir.mkdir(parents=True, exist_ok=True)

    name = _safe_name(file.filename)
    millis = int(time.time() * 1000)
    dest = target_dir / f"{millis}-{name}"
    while dest.exists():
        millis += 1
        dest = target_dir / f"{millis}-{name}"

    try:
        with dest.open("wb") as out:
            shutil.copyfileobj(file.file, out)
    except OSError:
        dest.unlink(missing_ok=True)
        raise
    logger.info(f"Stored upload {dest.name}")
    return f"{settings.UPLOAD_URL_PREFIX.rstrip('/')}/{dest.name}"


def save_uploads(files: list[UploadFile], upload_dir: str | None = None) -> list[str]:
    """
    Save a batch of images. Every file is checked before any is written,
    and a failure part way through removes the files already written.
    """
    for f in files:
        check_image(f)

    urls: list[str] = []
    try:
        for f in files:
            urls.append(save_upload(f, upload_dir))
    except Exception:
        remove_uploads(urls, upload_dir)
        raise
    return urls


def remove_uploads(urls: list[str], upload_dir: str | None = None) -> None:
    """Delete stored files by their public URL (used when the request is rolled back)."""
    target_dir = Path(upload_dir or settings.UPLOAD_DIR)
    for url in urls:
        path = target_dir / url.rsplit("/", 1)[-1]
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove orphaned upload {path.name}: {e}")
            continue
        logger.info(f"Removed orphaned upload {path.name}")
