# src/devdesk/alerts/alarm.py

from __future__ import annotations

import logging
import threading
from typing import Any

logger = logging.getLogger(__name__)

# (frequency Hz, duration s, start offset s): C5 eighth, E5 eighth, G5 quarter.
_ARPEGGIO = ((523.25, 0.25, 0.0), (659.25, 0.25, 0.3), (783.99, 0.5, 0.6))

_ATTACK_S = 0.01
_RELEASE_S = 0.5
_VOLUME = 0.2


class ToneAlarm:
    """
    Best-effort alarm tone.

    Design goals:
    - Optional dependencies (does not crash if numpy/sounddevice are missing).
    - Does not block the caller: playback happens in a daemon thread.

    If dependencies or the audio device are unavailable, the alarm disables
    itself and play_alarm_tone() becomes a no-op.
    """

    def __init__(self, enabled: bool = True, sample_rate: int = 44100) -> None:
        self.enabled = bool(enabled)
        self._sample_rate = int(sample_rate)
        self._np: Any = None
        self._sd: Any = None
        self._clip: Any = None

        if not self.enabled:
            logger.info("Alarm tone disabled.")
            return

        # Lazy / optional imports
        try:
            import numpy as np
            import sounddevice as sd
        except Exception as e:
            self.enabled = False
            logger.warning(
                "Alarm tone is enabled, but numpy/sounddevice failed to import "
                "(PortAudio missing?). Alarm will be silent. Error: %s",
                repr(e),
            )
            return

        self._np = np
        self._sd = sd

    def _render(self) -> Any:
        """Square-wave arpeggio with a short attack and exponential release."""
        np = self._np
        sr = self._sample_rate
        length = max(offset + dur for _f, dur, offset in _ARPEGGIO) + _RELEASE_S
        # Spare tail absorbs float rounding of the offsets.
        out = np.zeros(int(length * sr) + sr // 10, dtype=np.float32)

        for freq, dur, offset in _ARPEGGIO:
            n = int((dur + _RELEASE_S) * sr)
            t = np.arange(n, dtype=np.float32) / sr
            wave = np.sign(np.sin(2.0 * np.pi * freq * t))

            env = np.ones(n, dtype=np.float32)
            attack_n = max(1, int(_ATTACK_S * sr))
            env[:attack_n] = np.linspace(0.0, 1.0, attack_n, dtype=np.float32)
            hold_n = int(dur * sr)
            tail = t[hold_n:] - t[hold_n] if hold_n < n else t[:0]
            env[hold_n:] = np.exp(-5.0 * tail / _RELEASE_S)

            start = int(offset * sr)
            out[start:start + n] += (wave * env * _VOLUME).astype(np.float32)

        return np.clip(out, -1.0, 1.0)

    def play_alarm_tone(self) -> None:
        if not self.enabled:
            return
        try:
            if self._clip is None:
                self._clip = self._render()
        except Exception as e:
            logger.error("Alarm synthesis failed: %s", repr(e))
            self.enabled = False
            return

        def _play() -> None:
            try:
                self._sd.play(self._clip, self._sample_rate)
                self._sd.wait()
            except Exception as e:
                logger.error("Alarm playback failed: %s", repr(e))

        threading.Thread(target=_play, daemon=True).start()
