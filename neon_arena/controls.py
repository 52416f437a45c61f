"""
Polled input snapshot.

The window writes into an InputState as events arrive; the simulation only
reads it once per frame. Key names are stored lower-case so lookups are
case-insensitive.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Set, Tuple

# Direction -> key names that drive it
DEFAULT_BINDINGS: Dict[str, Tuple[str, ...]] = {
    "up": ("w", "up"),
    "down": ("s", "down"),
    "left": ("a", "left"),
    "right": ("d", "right"),
}


@dataclass
class Pointer:
    """Pointer position in playfield coordinates (y grows downwards)"""
    x: float = 0.0
    y: float = 0.0
    down: bool = False


@dataclass
class InputState:
    """Held keys plus pointer state"""
    keys: Set[str] = field(default_factory=set)
    pointer: Pointer = field(default_factory=Pointer)
    bindings: Dict[str, Tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_BINDINGS)
    )

    def press(self, key: str):
        self.keys.add(key.lower())

    def release(self, key: str):
        self.keys.discard(key.lower())

    def is_held(self, key: str) -> bool:
        return key.lower() in self.keys

    def any_held(self, keys: Iterable[str]) -> bool:
        return any(self.is_held(k) for k in keys)

    def direction_held(self, direction: str) -> bool:
        """True if any key bound to `direction` is held"""
        return self.any_held(self.bindings.get(direction, ()))

    def clear(self):
        self.keys.clear()
        self.pointer.down = False
