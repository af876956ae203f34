import sys
import sqlite3
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


@pytest.fixture(scope="session")
def prog_dir(tmp_path_factory):
    # Fake install dir: <prog_dir>/flag_tool + <prog_dir>/tmp/minitwit
    d = tmp_path_factory.mktemp("prog")
    (d / "flag_tool").write_text("#!/usr/bin/env python3\n", encoding="utf-8")
    (d / "tmp").mkdir()
    schema = (_THIS_DIR / "schema.sql").read_text(encoding="utf-8")
    conn = sqlite3.connect(str(d / "tmp" / "minitwit"))
    try:
        conn.executescript(schema)
        conn.commit()
    finally:
        conn.close()
    return d


@pytest.fixture(scope="session")
def exe_path(prog_dir):
    return str(prog_dir / "flag_tool")


@pytest.fixture(scope="session")
def tmp_db_path(prog_dir):
    return str(prog_dir / "tmp" / "minitwit")


@pytest.fixture(autouse=True)
def _clean_db(tmp_db_path, prog_dir):
    # Clean tables before each test for isolation
    conn = sqlite3.connect(tmp_db_path)
    try:
        for t in ("message", "follower", "user"):
            conn.execute(f"DELETE FROM {t}")
        conn.commit()
    finally:
        conn.close()
    cfg = prog_dir / "config.yaml"
    if cfg.exists():
        cfg.unlink()
    yield


@pytest.fixture()
def seed_messages(tmp_db_path):
    def _seed(*rows):
        conn = sqlite3.connect(tmp_db_path)
        try:
            conn.executemany(
                "INSERT INTO message(message_id, author_id, text, pub_date, flagged) VALUES(?,?,?,?,?)",
                rows,
            )
            conn.commit()
        finally:
            conn.close()
    return _seed


def flagged_map(db_path: str) -> dict:
    conn = sqlite3.connect(db_path)
    try:
        return dict(conn.execute("SELECT message_id, flagged FROM message").fetchall())
    finally:
        conn.close()


@pytest.fixture()
def flagged(tmp_db_path):
    return lambda: flagged_map(tmp_db_path)
