from __future__ import annotations

# flagtool/db.py
import logging
import os
import sqlite3
import sys
from contextlib import contextmanager
from typing import Iterator

from .services.config_svc import get_config

logger = logging.getLogger(__name__)

# 数据库路径解析：
# 1) 程序自身所在目录（sys.argv[0]，跟随软链接），与调用方 cwd 无关
# 2) 同目录 config.yaml 的 db_relpath（必须是相对路径）
# 3) 兜底：<程序目录>/tmp/minitwit


class StoreLocatorError(RuntimeError):
    """The running program's own path could not be determined."""


def get_program_path() -> str:
    prog = sys.argv[0] if sys.argv else ""
    if not prog or prog == "-c":
        raise StoreLocatorError(f"no program path in argv[0] ({prog!r})")
    try:
        return os.path.realpath(prog)
    except OSError as e:
        raise StoreLocatorError(str(e)) from e


def get_db_path(exe_path: str | None = None, cfg: dict | None = None) -> str:
    exe = exe_path or get_program_path()
    base = os.path.dirname(os.path.abspath(exe))
    cfg = cfg or get_config(base)
    path = os.path.join(base, cfg["db_relpath"])
    logger.debug("program=%s db_relpath=%s", exe, cfg["db_relpath"])
    return path


def open_conn(path: str) -> sqlite3.Connection:
    """
    打开 SQLite 连接（autocommit），row_factory 为 Row。
    立即读取 schema_version，让损坏/不可读的文件在打开阶段就报错。
    """
    conn = sqlite3.connect(path, isolation_level=None)
    try:
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA schema_version;").fetchone()
    except sqlite3.Error:
        conn.close()
        raise
    return conn


@contextmanager
def get_conn(db_path: str | None = None) -> Iterator[sqlite3.Connection]:
    """
    获取 SQLite 连接。优先使用显式传入的 db_path，否则走 get_db_path()。
    退出时无论正常/异常都只关闭一次。
    """
    path = db_path or get_db_path()
    conn = open_conn(path)
    try:
        yield conn
    finally:
        conn.close()
