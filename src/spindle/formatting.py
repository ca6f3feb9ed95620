"""Human-readable formatting helpers for track attributes."""

from spindle.config import constants


def sanitize_tag(tag_value: str) -> str:
    """Sanitizes a tag value.

    Sanitizes by:
        * removing any newline characters.
        * capping to 1000 characters total.

    Args:
        tag_value: The tag to sanitize (i.e. an artist or song name).

    Returns:
        The sanitized string.
    """
    # Remove any newlines
    tag_value = "".join(tag_value.splitlines())

    if len(tag_value) > constants.MAXIMUM_SONG_METADATA_CHARACTERS:
        # Cap the length of the string and append an ellipsis
        tag_value = tag_value[: constants.MAXIMUM_SONG_METADATA_CHARACTERS - 1] + "…"

    return tag_value


# format an amount of seconds into M:SS or H:MM:SS
def format_time(seconds: float) -> str:
    total = max(0, int(seconds))
    int_seconds = total % 60
    int_minutes = (total // 60) % 60
    int_hours = total // 3600

    if int_hours:
        return f"{int_hours}:{int_minutes:02d}:{int_seconds:02d}"
    return f"{int_minutes}:{int_seconds:02d}"


def format_file_size(num_bytes: int) -> str:
    """Format a byte count in megabytes, or gigabytes from 1 GB upwards.

    Uses decimal units, matching how desktop file browsers report sizes.
    """
    if num_bytes >= 1_000_000_000:
        return f"{num_bytes / 1_000_000_000:.2f} GB"
    return f"{num_bytes / 1_000_000:.1f} MB"


def format_sample_rate(sample_rate: float) -> str:
    """Format a sample rate in kHz, e.g. 44100 -> "44.1 kHz"."""
    return f"{sample_rate / 1000:.1f} kHz"
