"""Data models for cover animation decisions."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from spindle.errors import AnalyzerError


class AnimationStyle(Enum):
    """Animation applied to an album cover by the rendering layer."""

    KEN_BURNS = "ken_burns"
    PARALLAX = "parallax"
    AMBIENT_GLOW = "ambient_glow"
    NONE = "none"


@dataclass(frozen=True)
class AnimationParameters:
    """Tuning values carried alongside a style."""

    duration: float
    intensity: float
    focal_point: tuple[float, float]
    should_loop: bool = True
    should_strobe: bool = False


@dataclass(frozen=True)
class AnimationDecision:
    """Analyzer verdict for one album cover, stored verbatim."""

    style: AnimationStyle
    parameters: AnimationParameters
    reasoning: str | None = None


def decision_from_payload(payload: Any) -> AnimationDecision:
    """Build a decision from the analyzer's JSON object.

    Expected shape::

        {"style": "ken_burns", "duration": 20, "intensity": 0.2,
         "focalPoint": {"x": 0.5, "y": 0.4}, "shouldStrobe": false,
         "reasoning": "...", "confidence": 0.9}

    Unknown styles fall back to Ken Burns.

    Raises:
        AnalyzerError: If required fields are missing or have the wrong type.
    """
    if not isinstance(payload, dict):
        raise AnalyzerError("Analyzer payload is not a JSON object")

    try:
        focal = payload["focalPoint"]
        parameters = AnimationParameters(
            duration=float(payload["duration"]),
            intensity=float(payload["intensity"]),
            focal_point=(float(focal["x"]), float(focal["y"])),
            should_loop=True,
            should_strobe=bool(payload.get("shouldStrobe") or False),
        )
        style_name = str(payload["style"])
    except (KeyError, TypeError, ValueError) as e:
        raise AnalyzerError(f"Malformed analyzer payload: {e!r}") from e

    try:
        style = AnimationStyle(style_name)
    except ValueError:
        style = AnimationStyle.KEN_BURNS

    reasoning = payload.get("reasoning")
    return AnimationDecision(
        style=style,
        parameters=parameters,
        reasoning=str(reasoning) if reasoning is not None else None,
    )
