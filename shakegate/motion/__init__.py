"""Motion: accelerometer sources, shake detection and trace replay."""

from shakegate.motion.detector import DEBOUNCE_S, SHAKE_THRESHOLD_G, ShakeDetector
from shakegate.motion.hub import SensorHub
from shakegate.motion.replay import load_samples, replay_samples

__all__ = [
    "DEBOUNCE_S",
    "SHAKE_THRESHOLD_G",
    "SensorHub",
    "ShakeDetector",
    "load_samples",
    "replay_samples",
]
