"""Cover art helpers: validation, loose image lookup and dominant color."""

import logging
from io import BytesIO
from pathlib import Path

from PIL import Image, ImageStat, UnidentifiedImageError

from spindle.config import constants

logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]


def is_image(data: bytes) -> bool:
    """Check whether the bytes decode as an image format Pillow understands."""
    try:
        with Image.open(BytesIO(data)) as image:
            image.verify()
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        SyntaxError,
        ValueError,
    ):
        return False
    return True


def find_loose_artwork(audio_path: Path) -> bytes | None:
    """Look for a cover image sitting next to an audio file.

    Basenames are tried in preference order, each with every known extension.
    File names match regardless of case, so "Cover.JPG" counts as "cover.jpg".

    Args:
        audio_path: Path of the audio file whose directory is searched.

    Returns:
        Raw image bytes of the first readable match, or None.
    """
    directory = audio_path.parent
    try:
        entries = sorted(directory.iterdir())
    except OSError:
        return None

    by_name: dict[str, Path] = {}
    for entry in entries:
        by_name.setdefault(entry.name.casefold(), entry)

    for name in constants.LOOSE_ARTWORK_NAMES:
        for extension in constants.LOOSE_ARTWORK_EXTENSIONS:
            candidate = by_name.get(f"{name}.{extension}")
            if candidate is None or not candidate.is_file():
                continue
            try:
                return candidate.read_bytes()
            except OSError as e:
                logger.warning(f"Could not read loose artwork {candidate}: {e}")
    return None


def dominant_color(image_data: bytes) -> RGB | None:
    """Average color of a cover image.

    The image is downsampled to 50x50 and each RGB channel averaged.

    Args:
        image_data: Encoded image bytes.

    Returns:
        (r, g, b) tuple, or None if the image cannot be decoded.
    """
    try:
        with Image.open(BytesIO(image_data)) as image:
            small = image.convert("RGB").resize(constants.DOMINANT_COLOR_SAMPLE_SIZE)
    except (
        UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError
    ) as e:
        logger.debug(f"Could not compute dominant color: {e}")
        return None

    r_avg, g_avg, b_avg = ImageStat.Stat(small).mean[:3]
    return (int(r_avg), int(g_avg), int(b_avg))


def to_jpeg(image_data: bytes, quality: int = constants.ANALYSIS_JPEG_QUALITY) -> bytes:
    """Re-encode an image as JPEG.

    Raises:
        UnidentifiedImageError: If the bytes are not a decodable image.
        DecompressionBombError: If the image declares absurd dimensions.
    """
    with Image.open(BytesIO(image_data)) as image:
        output = BytesIO()
        image.convert("RGB").save(output, format="JPEG", quality=quality)
    return output.getvalue()
