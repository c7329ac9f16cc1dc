"""Tuning parameters exposed as UCI spin options.

Parameters are registered together with a comma separated list of their
names, the way they appear in source: ``tune.add("(a, b)", a, b)``. Each
parameter becomes one spin option (two for a score), and values set on the
options flow back into the parameters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, TextIO, Union

from .ucioption import Option, OptionsMap, OptionType

Range = tuple[int, int]
RangeFunction = Callable[[int], Range]
PostUpdate = Callable[[], None]


def default_range(v: int) -> Range:
    """Default option range for a parameter with value ``v``."""
    return (0, 2 * v) if v > 0 else (2 * v, 0)


class SetRange:
    """Option range given either as a function of the value or as fixed bounds."""

    def __init__(self, fun_or_min: Union[RangeFunction, int], max_value: Optional[int] = None) -> None:
        if max_value is None:
            if not callable(fun_or_min):
                raise TypeError("SetRange needs a range function or both bounds")
            self.fun: Optional[RangeFunction] = fun_or_min
            self.range: Optional[Range] = None
        else:
            self.fun = None
            self.range = (int(fun_or_min), int(max_value))

    def __call__(self, v: int) -> Range:
        if self.fun is not None:
            return self.fun(v)
        return self.range  # type: ignore[return-value]

    def __repr__(self) -> str:
        if self.fun is not None:
            return f"SetRange({getattr(self.fun, '__name__', self.fun)!r})"
        return f"SetRange{self.range!r}"


@dataclass
class Tunable:
    """A tunable parameter: an int, or a score given as (middlegame, endgame)."""

    value: Union[int, tuple[int, int]]

    def __post_init__(self) -> None:
        if isinstance(self.value, tuple):
            if len(self.value) != 2:
                raise ValueError("a score needs exactly two values")
            self.value = (int(self.value[0]), int(self.value[1]))
        elif isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"parameter type not supported: {type(self.value).__name__}")

    @property
    def is_score(self) -> bool:
        return isinstance(self.value, tuple)


def split_next(names: str, pop: bool = True) -> tuple[str, str]:
    """Take the next name from a comma separated list.

    Commas inside parentheses do not split. Returns the name, with
    whitespace removed, and the rest of the list; the list is only
    shortened when ``pop`` is set.
    """
    name = ""
    while True:
        comma = names.find(",")
        token = names if comma < 0 else names[:comma]
        if pop:
            names = names[len(token) + 1:]
        words = token.split()
        name += words[0] if words else token
        if name.count("(") == name.count(")"):
            return name, names
        if not pop or not names:
            raise ValueError(f"unbalanced parentheses in parameter names: {name!r}")


@dataclass
class _Entry:
    name: str
    target: Union[Tunable, PostUpdate]
    range: SetRange


class Tune:
    """Registry of tunable parameters bound to a set of UCI options."""

    def __init__(
        self,
        options: Optional[OptionsMap] = None,
        results: Optional[dict[str, int]] = None,
        output: Optional[TextIO] = None,
    ) -> None:
        self.options = options if options is not None else OptionsMap()
        self.results = dict(results or {})
        self.output = output
        self.update_on_last = False
        self._entries: list[_Entry] = []
        self._last_option: Optional[Option] = None

    def add(self, names: str, *args) -> int:
        """Register parameters; ``names`` is their parenthesised name list.

        A ``SetRange`` among the arguments sets the range for the parameters
        that follow it. Lists are registered element by element as
        ``name[i]``. Callables run after every update. Returns the number of
        entries added.
        """
        rng = SetRange(default_range)
        remaining = names[1:-1]
        added = 0
        for arg in args:
            name, remaining = split_next(remaining, True)
            if isinstance(arg, SetRange):
                rng = arg
                continue
            added += self._add_value(rng, name, arg)
        return added

    def _add_value(self, rng: SetRange, name: str, value) -> int:
        if isinstance(value, Tunable):
            self._entries.append(_Entry(name, value, rng))
            return 1
        if isinstance(value, (list, tuple)):
            return sum(
                self._add_value(rng, f"{name}[{i}]", item) for i, item in enumerate(value)
            )
        if callable(value):
            self._entries.append(_Entry(name, value, rng))
            return 1
        raise TypeError(f"parameter type not supported: {type(value).__name__}")

    def init(self) -> None:
        """Create the options for every registered parameter, then read them back."""
        for entry in self._entries:
            self._init_option(entry)
        self.read_options()

    def read_options(self) -> None:
        """Copy option values into the parameters and run post-update hooks."""
        for entry in self._entries:
            self._read_option(entry)

    def on_tune(self, option: Option) -> None:
        """Change hook of the generated options."""
        if not self.update_on_last or self._last_option is option:
            self.read_options()

    def _init_option(self, entry: _Entry) -> None:
        target = entry.target
        if not isinstance(target, Tunable):
            return
        if target.is_score:
            mg, eg = target.value  # type: ignore[misc]
            self._make_option("m" + entry.name, mg, entry.range)
            self._make_option("e" + entry.name, eg, entry.range)
        else:
            self._make_option(entry.name, target.value, entry.range)  # type: ignore[arg-type]

    def _read_option(self, entry: _Entry) -> None:
        target = entry.target
        if not isinstance(target, Tunable):
            target()
            return
        if target.is_score:
            mg_name, eg_name = "m" + entry.name, "e" + entry.name
            if mg_name in self.options:
                target.value = (int(self.options[mg_name]), target.value[1])  # type: ignore[index]
            if eg_name in self.options:
                target.value = (target.value[0], int(self.options[eg_name]))  # type: ignore[index]
        elif entry.name in self.options:
            target.value = int(self.options[entry.name])

    def _make_option(self, name: str, v: int, rng: SetRange) -> None:
        low, high = rng(v)
        # Nothing to tune when the range is empty
        if low == high:
            return
        if name in self.results:
            v = self.results[name]
        low, high = rng(v)
        self._last_option = self.options.add(
            name,
            Option(OptionType.SPIN, v, min_value=low, max_value=high, on_change=self.on_tune),
        )
        print(f"{name},{v},{low},{high},{(high - low) / 20.0:g},0.0020", file=self.output)