# chesscore

Building blocks for a UCI chess engine, in plain Python with no runtime
dependencies.

## Modules

| Module | Purpose |
| --- | --- |
| `chesscore.ucioption` | UCI options: `Option`, `OptionType` and `OptionsMap`. Names are case-insensitive, values are checked against the option's kind and bounds before they are taken, and a change hook runs on every accepted update. `str(options)` gives the `option name ... type ...` listing in the order options were added. `default_options(max_hash_mb)` builds the standard option set. |
| `chesscore.uci` | Protocol formatting and parsing: `value`, `wdl`, `win_rate_model`, `square`, `move_to_uci`, and parsers for the arguments of `go` (`parse_go`, returning `SearchLimits` and the ponder flag), `setoption` (`parse_setoption`) and `position` (`parse_position`). |
| `chesscore.tt` | `TranspositionTable`: clusters of three `TTEntry` records, sized in megabytes, with generation-based ageing, a depth-minus-age replacement choice in `probe` and a per-mille `hashfull` estimate. `Bound` names the bound types; `mul_hi64` maps keys to clusters. |
| `chesscore.timeman` | `TimeManagement` turns clock, increment and moves-to-go into `optimum` and `maximum` thinking times, with a "nodes as time" mode when `nodestime` is set. |
| `chesscore.tune` | `Tune`, `Tunable`, `SetRange`, `default_range` and `split_next` for exposing engine parameters as spin options during tuning sessions. |
| `chesscore.tbindex` | Index tables and position encoding for endgame tablebases: `build_tables`, `IndexTables`, `set_groups`, `encode_pieces` and `off_a1h8`. |

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Examples

Formatting a score for an `info` line:

```python
from chesscore import uci

uci.value(361)        # "cp 100"
uci.wdl(361, 64)      # " wdl <win> <draw> <loss>" in per mille
uci.move_to_uci(4, 7, castling=True)   # "e1g1"
```

Working with engine options:

```python
from chesscore.ucioption import default_options

options = default_options(33554432)
"hash" in options             # True: names are case-insensitive
options["Hash"].set("64")     # True; out-of-range or malformed values return False
int(options["Hash"])          # 64
print(options)                # the listing sent in reply to "uci"
```

Parsing commands:

```python
from chesscore.uci import parse_go, parse_position, parse_setoption

limits, ponder = parse_go("wtime 60000 btime 60000 winc 1000 binc 1000")
fen, moves = parse_position("startpos moves e2e4 e7e5")
name, value = parse_setoption("name Skill Level value 10")
```

Deciding how long to think:

```python
from chesscore.timeman import TimeManagement
from chesscore.uci import WHITE, parse_go

limits, _ = parse_go("wtime 60000 btime 60000")
tm = TimeManagement(move_overhead=10)
tm.init(limits, WHITE, 0)
tm.optimum, tm.maximum        # milliseconds
```

Using the transposition table:

```python
from chesscore.tt import Bound, TranspositionTable

table = TranspositionTable(16)
key = 0x1234_5678_9ABC_DEF0
found, entry = table.probe(key)
entry.save(key, 100, False, Bound.EXACT, 10, 0, 90, table.generation)
table.probe(key)[0]           # True
```

Exposing parameters for tuning:

```python
from chesscore.tune import Tunable, Tune
from chesscore.ucioption import OptionsMap

options = OptionsMap()
tune = Tune(options)
margin = Tunable(120)
bonus = Tunable((30, 40))     # a score: options "mbonus" and "ebonus"
tune.add("(margin, bonus)", margin, bonus)
tune.init()                   # creates the options and prints one line per option
options["margin"].set("150")
margin.value                  # 150
```

## What this package does not do

There is no engine here: no board representation or move generator, no
search, no evaluation, and no command loop reading UCI commands from standard
input. The `uci` module formats and parses protocol text, but acting on the
commands is left to the caller. The tablebase support stops at computing
indices (`tbindex`); it does not open, decompress or probe tablebase files.

## Notes

Time values are in milliseconds. Scores use the engine's internal scale, in
which 361 units correspond to one pawn in reported centipawns. Squares are
numbered 0 (a1) to 63 (h8).