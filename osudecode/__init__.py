from .beatmap import Beatmap, Circle, HitObject, HitObjectType, Slider, Timing
from .decoder import DecodeError, decode
from .diagnostics import DiagnosticCollector
from .game_mode import GameMode
from .position import Vector2

__version__ = "0.1.0"


__all__ = [
    "Beatmap",
    "Circle",
    "DecodeError",
    "DiagnosticCollector",
    "GameMode",
    "HitObject",
    "HitObjectType",
    "Slider",
    "Timing",
    "Vector2",
    "decode",
]
