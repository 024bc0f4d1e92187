"""
CSV writer
euctr/writer.py
"""

import csv
from pathlib import Path
from typing import Iterable, List, Union

from .config import LEGACY_OUTPUT_NAME, OUTPUT_PREFIX
from .exceptions import FileError
from .fields import Trial, column_attributes, column_headers


def output_path(jurisdiction: str, output_dir: Union[str, Path] = ".", legacy: bool = False) -> Path:
    """``eu-ctr-<code>.csv`` in output_dir (``eu-ctr.csv`` in legacy mode)."""
    name = LEGACY_OUTPUT_NAME if legacy else f"{OUTPUT_PREFIX}-{jurisdiction}.csv"
    return Path(output_dir) / name


def trial_to_row(trial: Trial) -> List[str]:
    return [getattr(trial, attr) for attr in column_attributes()]


def write_trials(path: Union[str, Path], trials: Iterable[Trial]) -> Path:
    """
    Write the header row plus one row per trial, truncating any existing file.

    A failure part way through leaves whatever was already written on disk.

    Raises:
        FileError: If the file cannot be created or a row cannot be written.
    """
    path = Path(path)
    try:
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, lineterminator="\n")
            writer.writerow(column_headers())
            for trial in trials:
                writer.writerow(trial_to_row(trial))
    except (OSError, csv.Error) as e:
        raise FileError(f"Failed to write CSV: {e}", path=str(path)) from e
    return path
