# -*- coding: utf-8 -*-

import csv
import json
import logging
from collections import Counter
from pathlib import Path

from ..utils.misc import mask_path, write_jsonl

RESULT_FIELDS = ("id", "success", "created", "error")
RESULT_FILE_SUFFIXES = (".json", ".jsonl", ".csv")


def write_json(data, path, indent=4, encoding="utf-8"):
    """
    Writes data to a JSON file.

    Args:
        data (dict or list): Data to write.
        path (str): Destination file path.
        indent (int): Indentation level for formatting.
    """
    with open(path, 'w', encoding=encoding) as f:
        json.dump(data, f, indent=indent)


def save_metadata(metadata, path):
    """
    Save job or batch metadata (as returned by `to_dict`) to JSON.
    """
    path = str(path)
    if not path.endswith('.json'):
        raise ValueError("Path must end with .json")
    write_json(metadata, path)
    logging.info(f"Saved metadata to {mask_path(path)}.")


def save_results(results, path):
    """
    Save per-record results to a .json, .jsonl or .csv file.

    Args:
        results (list[Result]): Results to save.
        path (str | Path): Destination path; the extension selects the format.
    """
    path = Path(path)
    rows = [result.to_dict() for result in results]
    match path.suffix.lower():
        case '.json':
            write_json(rows, path)
        case '.jsonl':
            write_jsonl(rows, path)
        case '.csv':
            with open(path, 'w', encoding='utf-8', newline='') as f:
                writer = csv.DictWriter(f, fieldnames=RESULT_FIELDS)
                writer.writeheader()
                writer.writerows(rows)
        case _:
            raise ValueError("Path must end with .json, .jsonl or .csv")
    logging.info(f"Saved {len(rows)} results to {mask_path(path)}.")


def summarize_results(results):
    """
    Count successes, failures and created records in a result set.

    Returns:
        dict: Totals plus the most frequent error messages.
    """
    errors = Counter(r.error for r in results if not r.success and r.error)
    succeeded = sum(1 for r in results if r.success)
    return {
        'total': len(results),
        'succeeded': succeeded,
        'failed': len(results) - succeeded,
        'created': sum(1 for r in results if r.created),
        'top_errors': errors.most_common(5),
    }
