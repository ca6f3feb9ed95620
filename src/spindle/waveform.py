"""Amplitude envelopes for the playback scrubber."""

import logging
from pathlib import Path

import numpy as np
from pydub import AudioSegment

from spindle.config import constants

logger = logging.getLogger(__name__)


def flat_envelope(samples: int) -> list[float]:
    return [constants.WAVEFORM_FALLBACK_LEVEL] * samples


def envelope(frames: np.ndarray, samples: int) -> list[float]:
    """Reduce normalized frames to ``samples`` amplitude values.

    The frames are split into equal buckets. Up to ~100 evenly strided
    points are read from each bucket, their RMS is boosted and clamped to
    ``[0.05, 1.0]``. A bucket with no frames reads 0.2. No frames at all
    gives the flat fallback envelope.

    Args:
        frames: One channel of samples scaled to ``[-1.0, 1.0]``.
        samples: Number of values to produce.

    Returns:
        Exactly ``samples`` floats.
    """
    total = len(frames)
    if total == 0:
        return flat_envelope(samples)

    values: list[float] = []
    for i in range(samples):
        start = i * total // samples
        end = (i + 1) * total // samples
        if end <= start:
            values.append(constants.WAVEFORM_EMPTY_BUCKET_LEVEL)
            continue

        stride = max(1, (end - start) // constants.WAVEFORM_POINTS_PER_BUCKET)
        points = frames[start:end:stride].astype(np.float64)
        rms = float(np.sqrt(np.mean(np.square(points))))
        level = min(1.0, max(constants.WAVEFORM_FLOOR, rms * constants.WAVEFORM_BOOST))
        values.append(level)

    return values


class WaveformSampler:
    """Computes a fixed-length envelope for an audio file.

    Decoding goes through pydub (and therefore ffmpeg for compressed formats).
    Sampling is blocking; callers run it in a worker thread.
    """

    def __init__(self, samples: int = constants.DEFAULT_WAVEFORM_SAMPLES):
        if samples <= 0:
            raise ValueError(f"Waveform sample count must be positive, got {samples}")
        self.samples = samples

    def sample(self, path: Path) -> list[float]:
        """Envelope for the file at ``path``.

        Never raises: undecodable input yields a flat 0.5 envelope.
        """
        try:
            frames = self._decode_first_channel(path)
        except Exception as e:
            logger.warning(f"Could not decode {path} for waveform: {e}")
            return flat_envelope(self.samples)

        return envelope(frames, self.samples)

    @staticmethod
    def _decode_first_channel(path: Path) -> np.ndarray:
        audio = AudioSegment.from_file(path)
        channel = audio.split_to_mono()[0] if audio.channels > 1 else audio
        raw = np.array(channel.get_array_of_samples())
        full_scale = float(1 << (8 * channel.sample_width - 1))
        return raw.astype(np.float64) / full_scale
