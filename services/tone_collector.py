"""Tone collector backed by the Twinword emotion analysis API."""

from typing import Any, Dict, List, Optional

import httpx
import structlog

from config import settings
from schemas.brief import EmotionScore, NewsItem, ToneInsights
from services.simulation import CollectorResult, SimulationMode, sentiment_for_emotion

logger = structlog.get_logger()

MAX_EMOTIONS = 6
HEADLINES_ANALYZED = 3


def build_tone_text(user_intent: str, news: List[NewsItem]) -> str:
    """Intent followed by the top headlines, space separated."""
    headlines = " ".join(item.title for item in news[:HEADLINES_ANALYZED])
    return f"{user_intent} {headlines}"


class ToneCollector:
    """Reads emotion and sentiment from the user's intent and recent headlines."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key or settings.twinword_api_key
        self.host = settings.twinword_host
        self.timeout = settings.collector_timeout
        self.transport = transport

    @property
    def is_available(self) -> bool:
        """True when a Twinword RapidAPI key is configured."""
        return bool(self.api_key)

    async def collect(
        self,
        user_intent: str,
        news: List[NewsItem],
        simulation: SimulationMode,
    ) -> CollectorResult[ToneInsights]:
        if not self.is_available:
            logger.info("Twinword API key not configured, using simulated tone")
            return CollectorResult(simulation.tone(), is_simulated=True)

        try:
            tone = await self._fetch(build_tone_text(user_intent, news))
        except (httpx.HTTPError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Tone analysis failed, using simulated tone", error=str(e))
            return CollectorResult(simulation.tone(), is_simulated=True)

        if tone is None:
            logger.warning("Twinword response had no emotions, using simulated tone")
            return CollectorResult(simulation.tone(), is_simulated=True)

        logger.info("Tone analyzed", emotion=tone.emotion, sentiment=tone.sentiment)
        return CollectorResult(tone, is_simulated=False)

    async def _fetch(self, text: str) -> Optional[ToneInsights]:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(
                f"https://{self.host}/analyze/",
                data={"text": text},
                headers={
                    "X-RapidAPI-Key": self.api_key,
                    "X-RapidAPI-Host": self.host,
                },
            )
            response.raise_for_status()
            data = response.json()

        return self._to_tone_insights(data)

    @staticmethod
    def _to_tone_insights(data: Dict[str, Any]) -> Optional[ToneInsights]:
        """
        Normalize a Twinword payload.

        Twinword reports ``emotions_detected`` (names, strongest first) and
        ``emotion_scores`` (name -> score). Sentiment and mood are derived from
        the dominant emotion unless the payload carries them.
        """
        scores = data.get("emotion_scores") or {}
        detected = data.get("emotions_detected") or []
        if not scores and not detected:
            return None

        ranked = sorted(scores.items(), key=lambda pair: pair[1], reverse=True)
        emotions = [EmotionScore(name=name, score=float(score)) for name, score in ranked[:MAX_EMOTIONS]]

        dominant = detected[0] if detected else ranked[0][0]
        if isinstance(dominant, dict):
            dominant = dominant.get("emotion")

        sentiment = data.get("sentiment")
        if sentiment not in ("positive", "negative", "neutral"):
            sentiment = sentiment_for_emotion(dominant)

        return ToneInsights(
            emotion=dominant,
            confidence=float(scores[dominant]) if dominant in scores else None,
            mood=data.get("mood") or sentiment,
            sentiment=sentiment,
            emotions=emotions,
        )


# Global collector instance
tone_collector = ToneCollector()
