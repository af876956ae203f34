# flagtool/services/config_svc.py
from __future__ import annotations

import logging
import os
import sys

import yaml

CONFIG_NAME = "config.yaml"

DEFAULTS = {
    "db_relpath": os.path.join("tmp", "minitwit"),
    "log_level": "WARNING",
}


def read_config(base_dir: str) -> dict:
    """读取程序目录下的 config.yaml；不存在或解析失败时返回 {}"""
    cfg_path = os.path.join(base_dir, CONFIG_NAME)
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        print(f"[WARN] ignoring {cfg_path}: {e}", file=sys.stderr)
        return {}
    return cfg if isinstance(cfg, dict) else {}


def get_config(base_dir: str) -> dict:
    cfg = read_config(base_dir)

    # 类型校验 & 默认兜底；db_relpath 必须是相对路径，保证库文件始终跟随程序目录
    relpath = cfg.get("db_relpath")
    if not (isinstance(relpath, str) and relpath.strip() and not os.path.isabs(relpath.strip())):
        relpath = DEFAULTS["db_relpath"]
    level = cfg.get("log_level")
    if not (isinstance(level, str) and isinstance(logging.getLevelName(level.strip().upper()), int)):
        level = DEFAULTS["log_level"]

    return {
        "db_relpath": relpath.strip(),
        "log_level": level.strip().upper(),
    }
