import asyncio
import logging
from typing import Awaitable, Callable, Dict, Optional

from dotenv import load_dotenv
from huggingface_hub import AsyncInferenceClient

from config import settings

# huggingface_hub also reads HF_* variables straight from the environment
load_dotenv()

logger = logging.getLogger(__name__)


class SpeechUnavailable(Exception):
    """The speech back-end failed or returned nothing usable."""


class PlaybackInterrupted(Exception):
    """The utterance was stopped or replaced before it finished."""


class SpeechService:

    def __init__(self, client: Optional[AsyncInferenceClient] = None):
        self.client = client or AsyncInferenceClient(token=settings.HUGGINGFACEHUB_API_TOKEN)

    async def synthesize(self, text: str) -> bytes:
        try:
            audio = await self.client.text_to_speech(text, model=settings.TTS_MODEL)
        except Exception as e:
            logger.error(f"Speech synthesis failed: {e}")
            raise SpeechUnavailable("Speech synthesis is unavailable") from e
        if not audio:
            raise SpeechUnavailable("Speech synthesis returned no audio")
        return audio

    async def transcribe(self, audio: bytes) -> str:
        try:
            result = await self.client.automatic_speech_recognition(audio, model=settings.ASR_MODEL)
        except Exception as e:
            logger.error(f"Speech recognition failed: {e}")
            raise SpeechUnavailable("Speech recognition is unavailable") from e
        text = result.text if hasattr(result, "text") else result.get("text", "")
        return (text or "").strip()


class Narrator:
    """
    Owns a single user's current utterance.

    Starting a new utterance cancels the one in flight; the caller waiting
    on the cancelled one gets PlaybackInterrupted.
    """

    def __init__(self):
        self._current: Optional[asyncio.Task] = None
        self.text: Optional[str] = None

    @property
    def is_playing(self) -> bool:
        return self._current is not None and not self._current.done()

    def stop(self) -> bool:
        task = self._current
        self._current = None
        self.text = None
        if task is not None and not task.done():
            task.cancel()
            return True
        return False

    async def speak(self, text: str, synthesize: Callable[[str], Awaitable[bytes]]) -> bytes:
        self.stop()
        task = asyncio.ensure_future(synthesize(text))
        self._current = task
        self.text = text
        try:
            return await task
        except asyncio.CancelledError:
            if self._current is not task:
                raise PlaybackInterrupted("Playback was stopped or replaced")
            raise
        finally:
            if self._current is task:
                self._current = None
                self.text = None


class NarratorRegistry:

    def __init__(self):
        self._narrators: Dict[int, Narrator] = {}

    def for_user(self, user_id: int) -> Narrator:
        if user_id not in self._narrators:
            self._narrators[user_id] = Narrator()
        return self._narrators[user_id]


narrators = NarratorRegistry()
