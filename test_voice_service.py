import pytest

from errors import VoiceUnavailableError
from voice_service import VoiceService


def test_missing_engines_disable_voice():
    voice = VoiceService()
    assert not voice.is_supported()
    with pytest.raises(VoiceUnavailableError):
        voice.speak("hello")
    with pytest.raises(VoiceUnavailableError):
        voice.listen()


def test_language_selects_locale():
    calls = []
    voice = VoiceService(speak_engine=lambda text, code: calls.append(code),
                         listen_engine=lambda code: f"heard in {code}")

    voice.speak("hello")
    voice.set_language("pa")
    voice.speak("ਸਤ ਸ੍ਰੀ ਅਕਾਲ")

    assert calls == ["en-US", "pa-IN"]
    assert voice.listen() == "heard in pa-IN"
    assert voice.is_supported()


def test_unknown_language_rejected():
    with pytest.raises(ValueError):
        VoiceService().set_language("fr")
