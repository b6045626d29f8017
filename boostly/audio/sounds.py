"""Completion chimes, synthesized with numpy and played with QSoundEffect.

The WAV files are rendered once into the sounds directory and reused on
later launches.

Sound names
-----------
- ``focus_complete``  rising arpeggio after a focus interval
- ``cycle_complete``  longer fanfare when the next break is the long one
- ``break_complete``  soft bell when a break is over
"""

from __future__ import annotations

import io
import logging
import wave
from pathlib import Path
from typing import Callable

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from .. import paths
from ..session.transitions import CompletedInterval
from ..session.types import SessionType

logger = logging.getLogger(__name__)

SOUND_NAMES = (
    "focus_complete",
    "cycle_complete",
    "break_complete",
)

SAMPLE_RATE = 44100


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS
# ═══════════════════════════════════════════════════════════════════════════


def _envelope(length: int, attack: int, release: int, sustain: float = 0.6) -> np.ndarray:
    """Attack ramp, flat sustain, release ramp (durations in samples)."""
    env = np.full(length, sustain, dtype=np.float64)
    a = min(attack, length)
    if a > 0:
        env[:a] = np.linspace(0.0, sustain, a)
    r = min(release, length - a)
    if r > 0:
        env[length - r:] = np.linspace(sustain, 0.0, r)
    return env


def _tone(freq: float, seconds: float, *, overtone: float = 0.0) -> np.ndarray:
    t = np.arange(int(SAMPLE_RATE * seconds)) / SAMPLE_RATE
    wave_ = np.sin(2 * np.pi * freq * t)
    if overtone:
        wave_ = wave_ + overtone * np.sin(4 * np.pi * freq * t)
    return wave_


def _silence(seconds: float) -> np.ndarray:
    return np.zeros(int(SAMPLE_RATE * seconds))


def _wav_bytes(samples: np.ndarray) -> bytes:
    """16-bit mono PCM WAV from floats in -1..1."""
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype(np.int16)
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(pcm.tobytes())
    return buf.getvalue()


def _arpeggio(notes: list[float], note_s: float, last_s: float, gap_s: float) -> np.ndarray:
    parts: list[np.ndarray] = []
    for i, freq in enumerate(notes):
        final = i == len(notes) - 1
        tone = _tone(freq, last_s if final else note_s, overtone=0.15 if final else 0.0)
        release = len(tone) // (2 if final else 3)
        parts.append(0.5 * tone * _envelope(len(tone), attack=80, release=release))
        if not final:
            parts.append(_silence(gap_s))
    return np.concatenate(parts)


def generate_focus_complete() -> bytes:
    """C5 → E5 → G5 → C6, quick and bright."""
    return _wav_bytes(_arpeggio([523.25, 659.25, 783.99, 1046.50], 0.10, 0.35, 0.02))


def generate_cycle_complete() -> bytes:
    """G4 → B4 → D5 → G5 with a held top note."""
    return _wav_bytes(_arpeggio([392.00, 493.88, 587.33, 783.99], 0.15, 0.55, 0.03))


def generate_break_complete() -> bytes:
    """A4 bell with a slow swell and long tail."""
    bell = 0.35 * _tone(440.0, 1.0, overtone=0.25)
    env = _envelope(
        len(bell),
        attack=int(SAMPLE_RATE * 0.08),
        release=int(SAMPLE_RATE * 0.6),
        sustain=0.8,
    )
    return _wav_bytes(np.concatenate([bell * env, _silence(0.05)]))


_GENERATORS: dict[str, Callable[[], bytes]] = {
    "focus_complete": generate_focus_complete,
    "cycle_complete": generate_cycle_complete,
    "break_complete": generate_break_complete,
}


def sound_for(interval: CompletedInterval) -> str:
    """Pick the chime for a finished interval."""
    if not interval.is_focus:
        return "break_complete"
    if interval.next_type is SessionType.LONG_BREAK:
        return "cycle_complete"
    return "focus_complete"


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Renders, caches and plays the completion chimes.

    Install :meth:`notify` as the session engine's notifier::

        sounds = SoundManager(parent=app)
        effects = CompletionEffects(notifier=sounds.notify)
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._volume = 0.7  # 0.0–1.0
        self._sounds_dir = sounds_dir or paths.SOUNDS_DIR
        self._effects: dict[str, QSoundEffect] = {}
        self._last_played: str | None = None

        self._ensure_wav_files()
        self._load_effects()

    # ── public API ────────────────────────────────────────────────────

    def set_volume(self, level: int) -> None:
        """Set volume (0-100).  Updates all loaded effects."""
        self._volume = max(0, min(level, 100)) / 100.0
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def play(self, name: str) -> None:
        """Play a sound by name.  No-op if disabled or name unknown."""
        if not self._enabled:
            return
        effect = self._effects.get(name)
        if effect is None:
            logger.debug("no sound loaded for %r", name)
            return
        self._last_played = name
        effect.play()

    def notify(self, interval: CompletedInterval) -> None:
        self.play(sound_for(interval))

    @property
    def volume(self) -> int:
        """Current volume as 0-100 integer."""
        return round(self._volume * 100)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def last_played(self) -> str | None:
        return self._last_played

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_wav_files(self) -> None:
        """Render any missing WAV files into the cache directory."""
        try:
            self._sounds_dir.mkdir(parents=True, exist_ok=True)
            for name, generate in _GENERATORS.items():
                path = self._sounds_dir / f"{name}.wav"
                if not path.exists():
                    path.write_bytes(generate())
        except OSError:
            logger.exception("could not write sounds to %s", self._sounds_dir)

    def _load_effects(self) -> None:
        for name in SOUND_NAMES:
            path = self._sounds_dir / f"{name}.wav"
            if path.exists():
                effect = QSoundEffect(self)
                effect.setSource(QUrl.fromLocalFile(str(path)))
                effect.setVolume(self._volume)
                self._effects[name] = effect
