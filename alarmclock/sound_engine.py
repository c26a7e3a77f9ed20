"""
sound_engine.py
───────────────
Alarm tone synthesis and playback.

Tones are synthesised with numpy and played through, in order of preference:
  - sounddevice (PortAudio, non-blocking)
  - a platform player spawned via subprocess (aplay / afplay / PowerShell)
  - nothing at all (NullSoundPort) when neither capability is present
"""

from __future__ import annotations

import logging
import os
import platform
import shutil
import subprocess
import tempfile
import threading
import wave
from io import BytesIO
from typing import Dict, Optional

import numpy as np

from alarmclock.models import SoundKind

try:
    import sounddevice as sd
except OSError:
    # The wheel imports fine but PortAudio itself is missing on this host.
    sd = None

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100
_SILENCE = 0.0001

# ── Sound profiles ─────────────────────────────────────────────────────────────
SOUND_PROFILES: Dict[str, dict] = {
    SoundKind.BEEP.value: {
        "waveform": "sine",
        "freq": 880,
        "peak": 0.2,
        "attack": 0.01,
        "decay_end": 0.25,
        "duration": 0.3,
        "description": "Short sine beep",
    },
    SoundKind.CHIME.value: {
        "waveform": "triangle",
        "freq": 660,
        "freq_end": 440,
        "sweep": 0.4,
        "peak": 0.25,
        "attack": 0.02,
        "decay_end": 0.5,
        "duration": 0.6,
        "description": "Falling triangle chime",
    },
}


# ── Waveform generators ────────────────────────────────────────────────────────

def _envelope(t: np.ndarray, profile: dict) -> np.ndarray:
    """Exponential ramp up to ``peak`` then exponential decay back to silence."""
    peak, attack, decay_end = profile["peak"], profile["attack"], profile["decay_end"]
    rise = _SILENCE * (peak / _SILENCE) ** np.clip(t / attack, 0.0, 1.0)
    fall = peak * (_SILENCE / peak) ** np.clip((t - attack) / (decay_end - attack), 0.0, 1.0)
    return np.where(t < attack, rise, fall)


def generate_samples(kind: str) -> np.ndarray:
    """Float32 mono samples in [-1, 1] for the named sound kind."""
    profile = SOUND_PROFILES[SoundKind(kind).value]
    n = int(SAMPLE_RATE * profile["duration"])
    t = np.arange(n) / SAMPLE_RATE

    freq = profile["freq"]
    freq_end = profile.get("freq_end", freq)
    sweep = profile.get("sweep", profile["duration"])
    # Frequency sweep (linear, then held)
    f = freq + (freq_end - freq) * np.clip(t / sweep, 0.0, 1.0)
    cycles = np.cumsum(f) / SAMPLE_RATE

    if profile["waveform"] == "triangle":
        wave_ = 2 * np.abs(2 * (cycles % 1) - 1) - 1
    else:
        wave_ = np.sin(2 * np.pi * cycles)

    return (wave_ * _envelope(t, profile)).astype(np.float32)


def build_wav_bytes(kind: str) -> bytes:
    """Wrap the samples as 16-bit PCM in a WAV container (in memory)."""
    pcm = (generate_samples(kind) * 32767).astype("<i2").tobytes()
    buf = BytesIO()
    with wave.open(buf, "wb") as w:
        w.setnchannels(1)
        w.setsampwidth(2)       # 16-bit
        w.setframerate(SAMPLE_RATE)
        w.writeframes(pcm)
    return buf.getvalue()


def write_wav(kind: str, path: str) -> str:
    with open(path, "wb") as f:
        f.write(build_wav_bytes(kind))
    return path


def get_all_sounds() -> list:
    return [
        {"name": name, "description": cfg["description"]}
        for name, cfg in SOUND_PROFILES.items()
    ]


# ── Playback ports ─────────────────────────────────────────────────────────────

class SoundPort:
    """Fire-and-forget playback of a sound kind."""

    name = "abstract"

    def play(self, kind: str = SoundKind.BEEP.value) -> None:
        raise NotImplementedError


class NullSoundPort(SoundPort):
    name = "none"

    def play(self, kind: str = SoundKind.BEEP.value) -> None:
        logger.debug("No audio output available, skipping %s", kind)


class SoundDevicePort(SoundPort):
    """Play using sounddevice (cross-platform, no subprocesses)."""

    name = "sounddevice"

    @staticmethod
    def available() -> bool:
        if sd is None:
            return False
        try:
            sd.query_devices(kind="output")
        except Exception:
            # PortAudio raises its own error types when no device is present
            return False
        return True

    def play(self, kind: str = SoundKind.BEEP.value) -> None:
        # sd.play returns immediately; a newer play() cuts the previous one.
        sd.play(generate_samples(kind), samplerate=SAMPLE_RATE)


def _player_command(path: str) -> Optional[list]:
    system = platform.system()
    if system == "Linux":
        return ["aplay", "-q", path]
    if system == "Darwin":
        return ["afplay", path]
    if system == "Windows":
        return ["powershell", "-c", f"(New-Object Media.SoundPlayer '{path}').PlaySync()"]
    return None


class SubprocessSoundPort(SoundPort):
    """
    Playback by spawning a platform audio player on a daemon thread, so the
    ticker never waits for the tone to finish.
    """

    name = "subprocess"

    @staticmethod
    def available() -> bool:
        cmd = _player_command("x.wav")
        return bool(cmd) and shutil.which(cmd[0]) is not None

    def play(self, kind: str = SoundKind.BEEP.value) -> None:
        wav_bytes = build_wav_bytes(kind)
        threading.Thread(
            target=self._play_wav, args=(wav_bytes,), daemon=True, name=f"sound-{kind}"
        ).start()

    @staticmethod
    def _play_wav(wav_bytes: bytes) -> None:
        with tempfile.NamedTemporaryFile(suffix=".wav", delete=False) as f:
            f.write(wav_bytes)
            tmp_path = f.name

        try:
            cmd = _player_command(tmp_path)
            if cmd is None:
                return
            proc = subprocess.Popen(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
            proc.wait()
        except OSError as e:
            logger.warning("Audio player failed: %s", e)
        finally:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass


_PORTS = {
    SoundDevicePort.name: SoundDevicePort,
    SubprocessSoundPort.name: SubprocessSoundPort,
}


def detect_sound_port(preference: str = "auto") -> SoundPort:
    """
    Pick a playback port.  ``preference`` is "auto", "none" or a port name;
    a named port that is not usable on this host degrades to NullSoundPort.
    """
    if preference == "none":
        return NullSoundPort()

    candidates = list(_PORTS.values()) if preference == "auto" else [_PORTS[preference]]
    for cls in candidates:
        if cls.available():
            logger.info("Sound output: %s", cls.name)
            return cls()

    logger.warning("No usable sound output (wanted %s); alarms will be silent", preference)
    return NullSoundPort()
