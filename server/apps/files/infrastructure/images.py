"""Background re-encoding of oversized uploaded images."""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Final

from PIL import Image, UnidentifiedImageError

from server.apps.files.conf import MEGABYTE, UploadSettings
from server.apps.files.exceptions import ImageOptimizationError
from server.apps.files.infrastructure.metadata import (
    get_file_extension,
    optimized_sibling,
)

OPTIMIZABLE_EXTENSIONS: Final = frozenset(('.jpg', '.jpeg', '.png', '.webp'))

_MAX_WORKERS: Final = 2

logger = logging.getLogger(__name__)

_executor = ThreadPoolExecutor(
    max_workers=_MAX_WORKERS,
    thread_name_prefix='image-optimizer',
)


def _encode_candidate(
    source: Path,
    candidate: Path,
    max_size: tuple[int, int],
    quality: int,
) -> None:
    """Write a bounded, progressive JPEG version of ``source``.

    Raises:
        ImageOptimizationError: If the image cannot be decoded or encoded.
    """
    try:
        with Image.open(source) as image:
            image.thumbnail(max_size)
            if image.mode != 'RGB':
                image = image.convert('RGB')
            image.save(
                candidate,
                format='JPEG',
                quality=quality,
                progressive=True,
                optimize=True,
            )
    except (
        OSError,
        ValueError,
        UnidentifiedImageError,
        Image.DecompressionBombError,
    ) as exc:
        raise ImageOptimizationError(str(exc)) from exc


def optimize_image(path: Path, upload_settings: UploadSettings) -> bool:
    """Re-encode a large image in place if that makes it smaller.

    The candidate is written next to the original and only moved over
    it when strictly smaller, so the file kept under ``path`` never
    grows. Failures are logged and leave the original untouched.

    Args:
        path: Absolute path of the stored image.
        upload_settings: Threshold and target dimensions.

    Returns:
        True if the original was replaced, False otherwise.
    """
    if get_file_extension(path.name) not in OPTIMIZABLE_EXTENSIONS:
        return False

    try:
        original_size = path.stat().st_size
    except OSError:
        logger.exception('Cannot stat image for optimization: %s', path)
        return False

    size_in_mb = original_size / MEGABYTE
    if original_size <= upload_settings.optimization_threshold:
        logger.info(
            'Image size (%.2fMB) below threshold, skipping optimization: %s',
            size_in_mb,
            path.name,
        )
        return False

    candidate = optimized_sibling(path)
    try:
        _encode_candidate(
            path,
            candidate,
            upload_settings.optimized_max_size,
            upload_settings.optimized_quality,
        )
        optimized_size = candidate.stat().st_size
        if optimized_size >= original_size:
            logger.info(
                'Optimized image not smaller (%d >= %d), keeping: %s',
                optimized_size,
                original_size,
                path.name,
            )
            candidate.unlink(missing_ok=True)
            return False
        candidate.replace(path)
    except (ImageOptimizationError, OSError):
        logger.exception('Image optimization failed for %s', path)
        candidate.unlink(missing_ok=True)
        return False

    logger.info(
        'Image optimized: %s (%.2fMB -> %.2fMB)',
        path.name,
        size_in_mb,
        optimized_size / MEGABYTE,
    )
    return True


def _log_unexpected_failure(future: Future[bool]) -> None:
    exc = future.exception()
    if exc is not None:
        logger.error(
            'Background image optimization failed',
            exc_info=(type(exc), exc, exc.__traceback__),
        )


def schedule_optimization(
    path: Path,
    upload_settings: UploadSettings,
) -> Future[bool]:
    """Run :func:`optimize_image` on a background thread.

    The request path never waits on the returned future.

    Args:
        path: Absolute path of the stored image.
        upload_settings: Threshold and target dimensions.

    Returns:
        Future resolving to the optimization outcome.
    """
    future = _executor.submit(optimize_image, path, upload_settings)
    future.add_done_callback(_log_unexpected_failure)
    return future
