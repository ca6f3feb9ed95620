"""Protocol definitions for AI services."""

from typing import Protocol

from spindle.ai.models import AnimationDecision


class CoverAnalyzer(Protocol):
    """Protocol for choosing an animation style for an album cover."""

    async def analyze(self, title: str, artwork_data: bytes) -> AnimationDecision:
        """Analyze a cover image.

        Args:
            title: Album title, used for logging and prompting.
            artwork_data: Encoded cover image.

        Returns:
            The analyzer's decision.

        Raises:
            AnalyzerError: If the service fails or answers with something
                that is not a valid decision.
        """
        ...
