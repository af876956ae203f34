from __future__ import annotations

from sqlite3 import Connection


def list_all(conn: Connection):
    """All rows of the MiniTwit `message` table, every column, storage order."""
    return conn.execute("SELECT * FROM message").fetchall()


def set_flagged(conn: Connection, message_id: int) -> int:
    cur = conn.execute(
        "UPDATE message SET flagged=1 WHERE message_id=?",
        (message_id,),
    )
    return int(cur.rowcount)
