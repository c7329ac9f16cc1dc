"""Chess engine infrastructure: UCI options and protocol helpers, transposition table, time management, tuning and tablebase indexing."""

__version__ = "0.1.0"

__all__ = ["ucioption", "uci", "tt", "timeman", "tune", "tbindex"]