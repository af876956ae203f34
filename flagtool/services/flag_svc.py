"""
Mode dispatch and query execution for the flag tool.

The three operator modes are resolved once from the raw argument vector into a
`Mode`, then executed against an already-open connection. Output formatting
stays here; SQL stays in the repository layer.
"""
from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional, Tuple

from ..repository import message_repo

logger = logging.getLogger(__name__)

USAGE = (
    "ITU-Minitwit Tweet Flagging Tool\n\n"
    "Usage:\n"
    "  flag_tool <tweet_id>...\n"
    "  flag_tool -i\n"
    "  flag_tool -h\n"
    "Options:\n"
    "-h            Show this screen.\n"
    "-i            Dump all tweets and authors to STDOUT.\n"
)

# 精确匹配，不做 argparse 式解析（无短选项合并、无 `--`）
MODE_FLAGS = {
    "-h": "help",
    "-i": "dump",
}

NULL_TEXT = "NULL"
SEPARATOR = ","


@dataclass(frozen=True)
class Mode:
    kind: str  # help | dump | flag | none
    ids: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class FlagResult:
    raw_id: str
    message_id: Optional[int] = None
    ok: bool = False
    error: Optional[str] = None


def parse_mode(argv: Iterable[str]) -> Mode:
    args = list(argv)
    if len(args) == 1 and args[0] in MODE_FLAGS:
        return Mode(MODE_FLAGS[args[0]])
    if args and not any(a in MODE_FLAGS for a in args):
        return Mode("flag", tuple(args))
    return Mode("none", tuple(args))


# SQLite INTEGER 为 64 位有符号整数
MIN_ID = -(2 ** 63)
MAX_ID = 2 ** 63 - 1


def parse_message_id(raw: str) -> int:
    s = raw.strip()
    digits = s[1:] if s[:1] in ("+", "-") else s
    if not digits or not digits.isascii() or not digits.isdigit():
        raise ValueError(f"Invalid tweet id: {raw}")
    mid = int(s)
    if not MIN_ID <= mid <= MAX_ID:
        raise ValueError(f"Invalid tweet id: {raw}")
    return mid


def _render_real(value: float) -> str:
    # 与 sqlite3 命令行一致（%!.15g）：15 位有效数字，整值保留 ".0"
    s = "%.15g" % value
    if s in ("inf", "-inf", "nan"):
        return s
    mantissa, sep, exp = s.partition("e")
    if "." not in mantissa:
        mantissa += ".0"
    return mantissa + sep + exp


def _render(value) -> str:
    if value is None:
        return NULL_TEXT
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, float):
        return _render_real(value)
    return str(value)


def format_row(row) -> str:
    return SEPARATOR.join(_render(v) for v in tuple(row))


def dump_rows(conn: sqlite3.Connection) -> Iterator[str]:
    """Yield every `message` row as one comma-joined line (NULL for None)."""
    rows = message_repo.list_all(conn)
    logger.debug("dump: %d rows", len(rows))
    for r in rows:
        yield format_row(r)


def flag_one(conn: sqlite3.Connection, raw_id: str) -> FlagResult:
    try:
        mid = parse_message_id(raw_id)
    except ValueError as e:
        return FlagResult(raw_id, error=str(e))
    try:
        n = message_repo.set_flagged(conn, mid)
    except sqlite3.Error as e:
        return FlagResult(raw_id, mid, error=f"SQL error: {e}")
    logger.debug("flag %s: %d rows affected", mid, n)
    if n == 0:
        return FlagResult(raw_id, mid, error=f"No entry with id: {raw_id}")
    return FlagResult(raw_id, mid, ok=True)


def flag_ids(conn: sqlite3.Connection, raw_ids: Iterable[str]) -> Iterator[FlagResult]:
    """按参数顺序逐个标记；单个失败不会中断整批"""
    for raw in raw_ids:
        yield flag_one(conn, raw)
