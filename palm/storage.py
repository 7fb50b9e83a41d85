import logging
import os
import secrets
from pathlib import Path

from flask import current_app

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {
    'image/jpeg': 'jpg',
    'image/png': 'png',
    'image/webp': 'webp',
    'image/heic': 'heic',
}

CONTENT_TYPES = {
    'jpg': 'image/jpeg',
    'jpeg': 'image/jpeg',
    'png': 'image/png',
    'webp': 'image/webp',
    'heic': 'image/heic',
}


class InvalidImagePath(ValueError):
    pass


class ImageStore:
    """Blob store for meal photos, laid out as meals/{user_id}/{meal_key}/{name}"""

    def __init__(self, root):
        self.root = Path(root).resolve()

    def resolve(self, path):
        if not path or path.startswith('/') or '\\' in path:
            raise InvalidImagePath(path)
        full = (self.root / path).resolve()
        if full == self.root or self.root not in full.parents:
            raise InvalidImagePath(path)
        return full

    def save(self, path, data):
        full = self.resolve(path)
        full.parent.mkdir(parents=True, exist_ok=True)
        full.write_bytes(data)
        logger.info('Stored image %s (%d bytes)', path, len(data))
        return len(data)

    def exists(self, path):
        return self.resolve(path).is_file()

    def open(self, path):
        return self.resolve(path).read_bytes()

    def size(self, path):
        full = self.resolve(path)
        return full.stat().st_size if full.is_file() else 0

    def delete(self, path):
        """Remove a blob, returning the number of bytes freed"""
        full = self.resolve(path)
        if not full.is_file():
            return 0
        size = full.stat().st_size
        full.unlink()
        logger.info('Deleted image %s', path)
        return size


def get_image_store():
    return ImageStore(current_app.config['IMAGE_STORAGE_ROOT'])


def build_image_path(user_id, meal_key, extension):
    return f"meals/{user_id}/{meal_key}/{secrets.token_hex(8)}.{extension}"


def content_type_for(path):
    extension = os.path.splitext(path)[1].lstrip('.').lower()
    return CONTENT_TYPES.get(extension, 'application/octet-stream')


def image_proxy_url(image):
    """Rewrite a stored image reference to the /api/images proxy"""
    if not image:
        return None
    if image.startswith(('http://', 'https://', '/api/images/')):
        return image
    return f"/api/images/{image}"


def is_image_owned_by(image, user_id):
    return bool(image) and image.startswith(f"meals/{user_id}/")
