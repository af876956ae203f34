#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ITU-Minitwit Tweet Flagging Tool (SQLite)

Commands:
  flag_tool <tweet_id>...   Flag (hide) each tweet by message_id
  flag_tool -i              Dump every row of the message table to STDOUT
  flag_tool -h              Show usage

Notes:
- The database lives at <directory of this program>/tmp/minitwit, whatever the
  caller's working directory is. A config.yaml next to the program may set
  `db_relpath` and `log_level`.
- Exit status is 1 only when the program path or the database cannot be
  opened; per-id failures are reported on STDERR and still exit 0.
"""

import logging
import os
import sqlite3
import sys

from flagtool.db import StoreLocatorError, get_conn, get_db_path, get_program_path
from flagtool.services.config_svc import get_config
from flagtool.services.flag_svc import USAGE, dump_rows, flag_ids, parse_mode

logger = logging.getLogger("flag_tool")


# ---------------- Commands ----------------

def cmd_help(conn, mode):
    print(USAGE)


def cmd_dump(conn, mode):
    try:
        for line in dump_rows(conn):
            print(line)
    except sqlite3.Error as e:
        print(f"SQL error: {e}", file=sys.stderr)


def cmd_flag(conn, mode):
    for res in flag_ids(conn, mode.ids):
        if res.ok:
            print(f"Flagged entry: {res.raw_id}")
        else:
            print(res.error, file=sys.stderr)


def cmd_none(conn, mode):
    if mode.ids:
        logger.warning("ignoring arguments: %s", " ".join(mode.ids))


COMMANDS = {
    "help": cmd_help,
    "dump": cmd_dump,
    "flag": cmd_flag,
    "none": cmd_none,
}


# ---------------- Entry ----------------

def main(argv=None, exe_path=None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)

    try:
        exe = exe_path or get_program_path()
    except StoreLocatorError as e:
        print(f"Cannot resolve program path: {e}", file=sys.stderr)
        return 1

    cfg = get_config(os.path.dirname(os.path.abspath(exe)))
    logging.basicConfig(
        level=cfg["log_level"],
        stream=sys.stderr,
        format="[%(name)s] %(levelname)s %(message)s",
    )

    db_path = get_db_path(exe, cfg)
    print(f"Opening database at: {db_path}")
    mode = parse_mode(args)
    logger.debug("mode=%s ids=%s", mode.kind, mode.ids)
    # cmd_* 自行处理查询错误，能逃出 with 的 sqlite3.Error 只来自打开阶段
    try:
        with get_conn(db_path) as conn:
            COMMANDS[mode.kind](conn, mode)
    except sqlite3.Error as e:
        print(f"Can't open database: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
