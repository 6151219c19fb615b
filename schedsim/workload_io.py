from __future__ import annotations

import csv
import json
import logging
import re
from pathlib import Path
from typing import List

from .errors import InvalidWorkloadError
from .models import Process

logger = logging.getLogger(__name__)

# NAME(ARRIVAL, DURATION), e.g. "A(0, 5)"
_FULL_PATTERN = re.compile(r"(\w+)\((\d+),\s*(\d+)\)")
# NAME(DURATION), arrival defaults to 0
_DURATION_ONLY_PATTERN = re.compile(r"(\w+)\((\d+)\)")
# Integer text accepted from CSV cells
_INT_TEXT = re.compile(r"[+-]?\d+")


def parse_process_text(text: str) -> List[Process]:
    """
    Parse the compact textual notation ``A(0,5) B(1, 3)`` into processes.

    Each token is ``NAME(ARRIVAL, DURATION)``. When the text holds no such
    token, ``NAME(DURATION)`` tokens are read instead with arrival time 0.
    Anything that matches neither form is ignored. Values are not
    validated here.
    """
    processes = [
        Process(name=m.group(1), arrival_time=int(m.group(2)), duration=int(m.group(3)))
        for m in _FULL_PATTERN.finditer(text)
    ]
    if processes:
        return processes

    return [
        Process(name=m.group(1), arrival_time=0, duration=int(m.group(2)))
        for m in _DURATION_ONLY_PATTERN.finditer(text)
    ]


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON, CSV or text file into a list of Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
    elif suffix == ".csv":
        processes = _load_csv(path)
    elif suffix == ".txt":
        processes = parse_process_text(path.read_text(encoding="utf-8"))
    else:
        raise ValueError(f"Unsupported workload format: {suffix} (use .json, .csv or .txt)")

    logger.info(f"Loaded {len(processes)} processes from {path}")
    return processes


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise InvalidWorkloadError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            processes.append(_process_from_mapping(row))
    return processes


def _int_field(mapping, key: str, default: int | None = None) -> int:
    """
    Read an integer field. JSON values must already be ints (bools are
    rejected); CSV text must be a base-10 integer. A missing key, or an
    empty CSV cell, falls back to ``default`` when one is given.
    """
    if key not in mapping or mapping[key] == "":
        if default is None:
            raise InvalidWorkloadError(f"Process entry is missing {key!r}: {mapping!r}")
        return default

    value = mapping[key]
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and _INT_TEXT.fullmatch(value.strip()):
        return int(value.strip())
    raise InvalidWorkloadError(f"Process field {key!r} must be an integer, got {value!r}")


def _process_from_mapping(mapping) -> Process:
    if not isinstance(mapping, dict):
        raise InvalidWorkloadError(f"Invalid process entry: {mapping!r}")

    name = mapping.get("name")
    if not isinstance(name, str):
        raise InvalidWorkloadError(f"Process name must be a string: {mapping!r}")

    return Process(
        name=name.strip(),
        arrival_time=_int_field(mapping, "arrival_time", default=0),
        duration=_int_field(mapping, "duration"),
    )
