"""
Site map writers: CSV, JSON and plain text.
"""
from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Callable, Dict, List, Sequence, Tuple, Union

from sitemapper.urls import FIELD_NAMES, URLRecord

PathLike = Union[str, Path]
Writer = Callable[[Sequence[URLRecord], URLRecord, PathLike], Path]


def output_path(seed: URLRecord, ext: str, out_dir: PathLike = ".") -> Path:
    """Output path: {out_dir}/site-map-{domain}.{ext}"""
    return Path(out_dir) / f"site-map-{seed.domain}.{ext}"


def write_csv(records: Sequence[URLRecord], seed: URLRecord, out_dir: PathLike = ".") -> Path:
    """Write a header row and one row per record."""
    path = output_path(seed, "csv", out_dir)
    with open(path, "w", encoding="utf-8", newline="") as fh:
        writer = csv.writer(fh, lineterminator="\n")
        writer.writerow(FIELD_NAMES)
        writer.writerows(record.as_row() for record in records)
    return path


def write_json(records: Sequence[URLRecord], seed: URLRecord, out_dir: PathLike = ".") -> Path:
    """Write records as a pretty-printed JSON array."""
    path = output_path(seed, "json", out_dir)
    payload = [record.as_dict() for record in records]
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(payload, fh, ensure_ascii=False, indent=2)
        fh.write("\n")
    return path


def write_txt(records: Sequence[URLRecord], seed: URLRecord, out_dir: PathLike = ".") -> Path:
    """Write one URL per line."""
    path = output_path(seed, "txt", out_dir)
    with open(path, "w", encoding="utf-8", newline="") as fh:
        for record in records:
            fh.write(record.url + "\n")
    return path


# Format code -> (label, writer) pairs, in write order
FORMATS: Dict[str, List[Tuple[str, Writer]]] = {
    "a": [("CSV", write_csv), ("JSON", write_json), ("TXT", write_txt)],
    "c": [("CSV", write_csv)],
    "j": [("JSON", write_json)],
    "t": [("TXT", write_txt)],
}
