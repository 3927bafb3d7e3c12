"""Metadata extraction utilities for uploaded files."""

import mimetypes
import re
import secrets
import time
from pathlib import Path, PurePath
from typing import Final, TypeVar

_RANDOM_SUFFIX_UPPER_BOUND: Final = 10**9
_UNSAFE_BASENAME_CHARS: Final = re.compile(r'[^A-Za-z0-9]')
_UNSAFE_EXTENSION_CHARS: Final = re.compile(r'[^A-Za-z0-9]')

_PathT = TypeVar('_PathT', bound=PurePath)


def detect_mime_type(filename: str, declared: str | None = None) -> str:
    """Detect MIME type of an uploaded file.

    Prefers the content type declared in the multipart part, falling
    back to a guess from the filename extension.

    Args:
        filename: Original filename with extension.
        declared: Content type sent by the client, if any.

    Returns:
        MIME type string (e.g., 'image/jpeg', 'application/pdf').
        Returns 'application/octet-stream' if type cannot be determined.
    """
    if declared:
        return declared.split(';', 1)[0].strip().lower()
    mime_type, _ = mimetypes.guess_type(filename)
    if mime_type is None:
        return 'application/octet-stream'
    return mime_type


def get_file_extension(filename: str) -> str:
    """Get file extension from filename.

    Args:
        filename: Filename (e.g., 'photo.JPG').

    Returns:
        Extension with dot, lowercase (e.g., '.jpg').
        Returns empty string if no extension.
    """
    return Path(filename).suffix.lower()


def generate_filename(original_name: str) -> str:
    """Generate a collision-resistant filename for an upload.

    Example: 'my photo.jpg' -> 'my_photo-1760000000000000000-42.jpg'

    Args:
        original_name: Filename sent by the client.

    Returns:
        '<sanitized base>-<timestamp ns>-<random>.<ext>'
    """
    path = Path(original_name)
    base_name = _UNSAFE_BASENAME_CHARS.sub('_', path.stem)
    extension = _UNSAFE_EXTENSION_CHARS.sub('', path.suffix)
    unique_suffix = '{timestamp}-{random}'.format(
        timestamp=time.time_ns(),
        random=secrets.randbelow(_RANDOM_SUFFIX_UPPER_BOUND),
    )
    if extension:
        return f'{base_name}-{unique_suffix}.{extension}'
    return f'{base_name}-{unique_suffix}'


def optimized_sibling(path: _PathT) -> _PathT:
    """Path of the optimizer's candidate file next to ``path``.

    Example: 'images/a.jpg' -> 'images/a_optimized.jpg'

    Args:
        path: Original image path.

    Returns:
        Sibling path for the re-encoded candidate.
    """
    return path.with_name(f'{path.stem}_optimized{path.suffix}')
