"""Render the built-in alarm tones to WAV files (for a browser front-end)."""

import os
import sys

from alarmclock.sound_engine import SOUND_PROFILES, write_wav

out_dir = sys.argv[1] if len(sys.argv) > 1 else "frontend/public/sounds"
os.makedirs(out_dir, exist_ok=True)

for name in SOUND_PROFILES:
    path = write_wav(name, os.path.join(out_dir, f"{name}.wav"))
    print(f"Generated {path}")
