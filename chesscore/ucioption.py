"""UCI engine options: typed values, validation and the protocol listing."""

from __future__ import annotations

import copy
import enum
import re
import string
from typing import Callable, Iterator, Optional

_ASCII_FOLD = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)

_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:inf(?:inity)?|nan|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))",
    re.IGNORECASE,
)


def _fold(text: str) -> str:
    return text.translate(_ASCII_FOLD)


def _stof(text: str) -> float:
    """Parse the leading floating point number of ``text``."""
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"not a number: {text!r}")
    return float(match.group(1))


def case_insensitive_less(a: str, b: str) -> bool:
    """Compare two strings lexicographically, ignoring ASCII case."""
    return _fold(a) < _fold(b)


class OptionType(enum.Enum):
    """The option kinds defined by the UCI protocol."""

    STRING = "string"
    CHECK = "check"
    BUTTON = "button"
    SPIN = "spin"
    COMBO = "combo"


OnChange = Callable[["Option"], None]


class Option:
    """A single UCI option with its default and current value."""

    def __init__(
        self,
        kind: OptionType,
        default=None,
        *,
        current: Optional[str] = None,
        min_value: int = 0,
        max_value: int = 0,
        on_change: Optional[OnChange] = None,
    ) -> None:
        self.kind = OptionType(kind)
        if self.kind is OptionType.BUTTON:
            text = ""
        elif self.kind is OptionType.CHECK:
            text = "true" if default else "false"
        elif self.kind is OptionType.SPIN:
            if default is None:
                raise TypeError("a spin option needs a default value")
            text = f"{float(default):.6f}"
        else:
            text = "" if default is None else str(default)

        self.default_value = text
        self.current_value = text if current is None else current
        spin = self.kind is OptionType.SPIN
        self.min = min_value if spin else 0
        self.max = max_value if spin else 0
        self.on_change = on_change
        self.order = 0

    def set(self, value: str) -> bool:
        """Update the current value and fire the change hook.

        Values that do not fit the option are ignored; the return value tells
        whether the update was applied.
        """
        kind = self.kind
        if kind not in (OptionType.BUTTON, OptionType.STRING) and not value:
            return False
        if kind is OptionType.CHECK and value not in ("true", "false"):
            return False
        if kind is OptionType.SPIN:
            number = _stof(value)
            if number < self.min or number > self.max:
                return False
        if kind is OptionType.COMBO:
            choices = {_fold(token) for token in self.default_value.split()}
            if _fold(value) not in choices or value == "var":
                return False

        if kind is not OptionType.BUTTON:
            self.current_value = value
        if self.on_change is not None:
            self.on_change(self)
        return True

    def __float__(self) -> float:
        if self.kind is OptionType.SPIN:
            return _stof(self.current_value)
        if self.kind is OptionType.CHECK:
            return 1.0 if self.current_value == "true" else 0.0
        raise TypeError(f"a {self.kind.value} option has no numeric value")

    def __int__(self) -> int:
        return int(float(self))

    def __str__(self) -> str:
        return self.current_value

    def __eq__(self, other) -> bool:
        if isinstance(other, str):
            return _fold(self.current_value) == _fold(other)
        if isinstance(other, Option):
            return (
                self.kind is other.kind
                and self.default_value == other.default_value
                and self.current_value == other.current_value
                and self.min == other.min
                and self.max == other.max
            )
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Option({self.kind.value!r}, default={self.default_value!r}, "
            f"current={self.current_value!r})"
        )


class OptionsMap:
    """Options keyed case-insensitively, remembering the order they were added."""

    def __init__(self) -> None:
        self._items: dict[str, tuple[str, Option]] = {}
        self._next_order = 0

    def add(self, name: str, option: Option) -> Option:
        """Store a copy of ``option`` under ``name`` and return the stored copy."""
        key = _fold(name)
        stored = copy.copy(option)
        stored.order = self._next_order
        self._next_order += 1
        existing = self._items.get(key)
        display = existing[0] if existing is not None else name
        self._items[key] = (display, stored)
        return stored

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and _fold(name) in self._items

    def __getitem__(self, name: str) -> Option:
        try:
            return self._items[_fold(name)][1]
        except KeyError:
            raise KeyError(name) from None

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        for key in sorted(self._items):
            yield self._items[key][0]

    def items(self) -> Iterator[tuple[str, Option]]:
        for key in sorted(self._items):
            yield self._items[key]

    def __str__(self) -> str:
        parts = []
        for name, option in sorted(self._items.values(), key=lambda item: item[1].order):
            line = f"\noption name {name} type {option.kind.value}"
            if option.kind in (OptionType.STRING, OptionType.CHECK, OptionType.COMBO):
                line += f" default {option.default_value}"
            if option.kind is OptionType.SPIN:
                line += (
                    f" default {int(_stof(option.default_value))}"
                    f" min {option.min} max {option.max}"
                )
            parts.append(line)
        return "".join(parts)


def default_options(max_hash_mb: int) -> OptionsMap:
    """Build the engine's options with their hard-coded defaults."""
    options = OptionsMap()
    spin = OptionType.SPIN
    check = OptionType.CHECK
    text = OptionType.STRING
    options.add("Debug Log File", Option(text, ""))
    options.add("Threads", Option(spin, 1, min_value=1, max_value=1024))
    options.add("Hash", Option(spin, 16, min_value=1, max_value=max_hash_mb))
    options.add("Clear Hash", Option(OptionType.BUTTON))
    options.add("Ponder", Option(check, False))
    options.add("MultiPV", Option(spin, 1, min_value=1, max_value=500))
    options.add("Skill Level", Option(spin, 20, min_value=0, max_value=20))
    options.add("Move Overhead", Option(spin, 10, min_value=0, max_value=5000))
    options.add("Slow Mover", Option(spin, 100, min_value=10, max_value=1000))
    options.add("nodestime", Option(spin, 0, min_value=0, max_value=10000))
    options.add("UCI_Chess960", Option(check, False))
    options.add("UCI_AnalyseMode", Option(check, False))
    options.add("UCI_LimitStrength", Option(check, False))
    options.add("UCI_Elo", Option(spin, 1350, min_value=1350, max_value=2850))
    options.add("UCI_ShowWDL", Option(check, False))
    options.add("SyzygyPath", Option(text, "<empty>"))
    options.add("SyzygyProbeDepth", Option(spin, 1, min_value=1, max_value=100))
    options.add("Syzygy50MoveRule", Option(check, True))
    options.add("SyzygyProbeLimit", Option(spin, 7, min_value=0, max_value=7))
    options.add("Use NNUE", Option(check, True))
    return options