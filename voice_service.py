"""
CareSync: Voice Capabilities
Optional speech synthesis / recognition; missing engines disable the feature
"""

import logging
from typing import Callable, Optional

from errors import VoiceUnavailableError

logger = logging.getLogger(__name__)

LANGUAGE_CODES = {
    "en": "en-US",
    "pa": "pa-IN",
}

SpeakEngine = Callable[[str, str], None]
ListenEngine = Callable[[str], str]


class VoiceService:
    """
    Wraps host-provided engines:
      speak(text, language_code) -> None
      listen(language_code) -> recognized text
    """

    def __init__(self, speak_engine: Optional[SpeakEngine] = None,
                 listen_engine: Optional[ListenEngine] = None,
                 language: str = "en"):
        self.speak_engine = speak_engine
        self.listen_engine = listen_engine
        self.language = language

    def set_language(self, language: str) -> None:
        if language not in LANGUAGE_CODES:
            raise ValueError(f"Unsupported language: {language}")
        self.language = language

    @property
    def can_speak(self) -> bool:
        return self.speak_engine is not None

    @property
    def can_listen(self) -> bool:
        return self.listen_engine is not None

    def is_supported(self) -> bool:
        return self.can_speak and self.can_listen

    def speak(self, text: str, language: Optional[str] = None) -> None:
        if self.speak_engine is None:
            raise VoiceUnavailableError("Speech synthesis not supported")
        code = LANGUAGE_CODES[language or self.language]
        self.speak_engine(text, code)

    def listen(self) -> str:
        if self.listen_engine is None:
            raise VoiceUnavailableError("Speech recognition not supported")
        text = self.listen_engine(LANGUAGE_CODES[self.language])
        logger.info(f"🎙️ Recognized {len(text)} characters")
        return text
