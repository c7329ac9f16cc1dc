"""Time management: how long to think for the current move."""

from __future__ import annotations

import math
import time


def _now_ms() -> int:
    return int(time.monotonic() * 1000)


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


class TimeManagement:
    """Computes optimum and maximum thinking time for a move.

    Supports "x basetime (+ z increment)" and "x moves in y seconds (+ z
    increment)". A non-zero ``nodestime`` switches to nodes-as-time mode.
    """

    def __init__(
        self,
        move_overhead: int = 10,
        slow_mover: int = 100,
        nodestime: int = 0,
        ponder: bool = False,
    ) -> None:
        self.move_overhead = int(move_overhead)
        self.slow_mover = int(slow_mover)
        self.nodestime = int(nodestime)
        self.ponder = bool(ponder)
        self.available_nodes = 0
        self.npmsec = 0
        self._start_time = 0
        self._optimum = 0
        self._maximum = 0

    @property
    def optimum(self) -> int:
        return self._optimum

    @property
    def maximum(self) -> int:
        return self._maximum

    def init(self, limits, us, ply) -> None:
        """Compute the time bounds for side ``us`` at game ply ``ply``.

        In nodes-as-time mode ``limits`` is converted in place to nodes.
        """
        overhead = self.move_overhead
        npmsec = self.nodestime

        if npmsec:
            if not self.available_nodes:
                self.available_nodes = npmsec * limits.time[us]
            limits.time[us] = int(self.available_nodes)
            limits.inc[us] *= npmsec
            limits.npmsec = npmsec

        self.npmsec = limits.npmsec
        self._start_time = limits.start_time

        my_time = limits.time[us]
        my_inc = limits.inc[us]
        mtg = min(limits.movestogo, 50) if limits.movestogo else 50

        time_left = max(1, my_time + my_inc * (mtg - 1) - overhead * (2 + mtg))

        if my_time:
            opt_extra = min(max(1.0 + 12.0 * my_inc / my_time, 1.0), 1.12)
        else:
            opt_extra = 1.12 if my_inc > 0 else 1.0

        time_left = self.slow_mover * time_left // 100

        if limits.movestogo == 0:
            opt_scale = (
                min(
                    0.0120 + math.pow(ply + 3.0, 0.45) * 0.0039,
                    0.2 * my_time / float(time_left),
                )
                * opt_extra
            )
            max_scale = min(7.0, 4.0 + ply / 12.0)
        else:
            opt_scale = min(
                (0.88 + ply / 116.4) / mtg,
                0.88 * my_time / float(time_left),
            )
            max_scale = min(6.3, 1.5 + 0.11 * mtg)

        self._optimum = int(opt_scale * time_left)
        self._maximum = int(min(0.8 * my_time - overhead, max_scale * self._optimum))

        if self.ponder:
            self._optimum += _trunc_div(self._optimum, 4)

    def elapsed(self, nodes_searched) -> int:
        """Time used so far, or nodes searched in nodes-as-time mode."""
        if self.npmsec:
            return int(nodes_searched)
        return _now_ms() - self._start_time