"""Cover animation analysis."""

from spindle.ai.models import (
    AnimationDecision,
    AnimationParameters,
    AnimationStyle,
    decision_from_payload,
)
from spindle.ai.openai_analyzer import OpenAICoverAnalyzer
from spindle.ai.protocols import CoverAnalyzer

__all__ = [
    "AnimationDecision",
    "AnimationParameters",
    "AnimationStyle",
    "CoverAnalyzer",
    "OpenAICoverAnalyzer",
    "decision_from_payload",
]
