# -*- coding: utf-8 -*-

import os
import json
from pathlib import Path

import yaml


#=======================================================================
# File Formats
#=======================================================================

def read_yaml(path):
    """Read a YAML file; returns None for an empty file."""
    with open(path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f)


def write_yaml(data, path):
    """Write `data` as block-style YAML, keeping the key order."""
    with open(path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)


def write_jsonl(rows, path):
    """
    Write one JSON document per line.

    Args:
        rows (list[dict]): Rows to write.
        path (str | Path): Destination file.
    """
    with open(path, 'w', encoding='utf-8') as f:
        for row in rows:
            f.write(json.dumps(row, ensure_ascii=False) + '\n')


def read_jsonl(path):
    """Read a JSON Lines file, skipping blank lines."""
    with open(path, 'r', encoding='utf-8') as f:
        return [json.loads(line) for line in f if line.strip()]


#=======================================================================
# Logging Helpers
#=======================================================================

def mask_path(path, base_dir=None):
    """
    Shorten a path for log messages.

    The path is made relative to `base_dir` (or $PROJECT_DIR) when it lives
    under it, otherwise the home directory is replaced by '~'.
    """
    path = Path(path)
    base_dir = base_dir or os.getenv('PROJECT_DIR')

    for base, prefix in ((base_dir, ''), (Path.home(), '~/')):
        if not base:
            continue
        try:
            return f"{prefix}{path.relative_to(Path(base))}"
        except ValueError:
            continue
    return str(path)
