"""OpenAI implementation of the CoverAnalyzer protocol."""

import base64
import json
import logging

import openai
from PIL import Image, UnidentifiedImageError

from spindle import artwork
from spindle.ai.models import AnimationDecision, decision_from_payload
from spindle.config import constants
from spindle.errors import AnalyzerError

logger = logging.getLogger(__name__)

ANALYSIS_PROMPT = """\
You are an expert at analyzing album cover artwork to determine the perfect animation style.

The animation must be clearly visible. Aim for "pop" and depth without being cartoonish.

If the cover contains text (title, artist), choose a style or parameters that keep the \
text stationary and readable. Do not warp or crop text.

Styles:
1. ken_burns: Deep, noticeable breathing or scanning. Use for portraits with a clear subject.
2. parallax: Strong 3D perspective shift where the subject feels detached from the \
background. Use for images with clear foreground/background separation. If the image \
contains a very bright light source (sun, lightbulb, neon, lens flare), set \
"shouldStrobe" to true.
3. ambient_glow: Strong, visible pulse of light and blur. For abstract art.
4. none: Text-only or extremely cluttered images.

Analyze the image and return ONLY JSON:
{"style": "ken_burns"|"parallax"|"ambient_glow"|"none", "duration": <15-25>, \
"intensity": <0.15-0.25>, "focalPoint": {"x": <0-1>, "y": <0-1>}, \
"shouldStrobe": <true/false>, "reasoning": "...", "confidence": <0-1>}
"""


class OpenAICoverAnalyzer:
    """OpenAI implementation of CoverAnalyzer protocol."""

    def __init__(
        self,
        api_key: str,
        model: str,
        timeout: float = constants.ANALYSIS_REQUEST_TIMEOUT,
    ):
        self._client = openai.AsyncOpenAI(api_key=api_key)
        self._model = model
        self._timeout = timeout

    async def analyze(self, title: str, artwork_data: bytes) -> AnimationDecision:
        """Ask the model to pick an animation style for a cover.

        Raises:
            AnalyzerError: If the image cannot be prepared, the API call
                fails, or the reply is not a valid decision.
        """
        try:
            jpeg = artwork.to_jpeg(artwork_data)
        except (
            UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError
        ) as e:
            raise AnalyzerError(f"Image processing failed: {e}") from e

        image_url = f"data:image/jpeg;base64,{base64.b64encode(jpeg).decode('ascii')}"

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": ANALYSIS_PROMPT},
                            {"type": "image_url", "image_url": {"url": image_url}},
                        ],
                    }
                ],  # type: ignore
                response_format={"type": "json_object"},
                temperature=0.3,
                timeout=self._timeout,
            )
        except openai.OpenAIError as e:
            raise AnalyzerError(f"OpenAI API error: {e}") from e

        if not response.choices or not response.choices[0].message.content:
            raise AnalyzerError("Empty response from OpenAI")

        decision = parse_response(response.choices[0].message.content)
        logger.info(
            f"Decision for {title}: {decision.style.value} - {decision.reasoning or ''}"
        )
        return decision


def parse_response(text: str) -> AnimationDecision:
    """Parse the model's reply, tolerating a Markdown code fence around it."""
    cleaned = text.replace("```json", "").replace("```", "").strip()
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise AnalyzerError(f"JSON parse error: {e}") from e
    return decision_from_payload(payload)
