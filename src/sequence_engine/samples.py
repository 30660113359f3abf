"""Sample ingestion and rendering for the CLI and service front-ends."""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Iterable, Iterator, List, TextIO, Tuple

import pandas as pd

from .errors import ArgumentError

END_TOKEN = "END"
STOP_TOKEN = "STOP"
CAPTURE_END_TOKENS = (END_TOKEN, STOP_TOKEN)


def tokenize(stream: TextIO) -> Iterator[str]:
    """Yield whitespace-separated tokens lazily, line by line."""
    for line in stream:
        yield from line.split()


def parse_float(token: str) -> float:
    try:
        return float(token)
    except ValueError as exc:
        raise ArgumentError(f"invalid numeric token {token!r}") from exc


def parse_length(token: str) -> int:
    try:
        value = int(token)
    except ValueError as exc:
        raise ArgumentError(f"invalid sequence length {token!r}") from exc
    if value < 0:
        raise ArgumentError(f"sequence length must be non-negative (got {value})")
    return value


def read_counted(tokens: Iterator[str]) -> List[float]:
    """Read ``<len> v0 v1 ... v(len-1)``."""
    head = next(tokens, None)
    if head is None:
        raise ArgumentError("failed to read sequence length")
    length = parse_length(head)
    values: list[float] = []
    for i in range(length):
        token = next(tokens, None)
        if token is None:
            raise ArgumentError(f"failed to read sequence element at index {i}")
        values.append(parse_float(token))
    return values


def read_counted_pair(tokens: Iterator[str]) -> Tuple[List[float], List[float]]:
    return read_counted(tokens), read_counted(tokens)


def iter_stream_values(tokens: Iterable[str], end_tokens: Iterable[str] = (END_TOKEN,)) -> Iterator[float]:
    """Numeric tokens up to an end marker (case-insensitive) or end of input."""
    stops = {t.lower() for t in end_tokens}
    for token in tokens:
        if token.lower() in stops:
            return
        yield parse_float(token)


def read_fixed_span(tokens: Iterator[str], length: int) -> List[float]:
    """Exactly ``length`` numeric tokens; a short input or an early end marker is an error."""
    stops = {t.lower() for t in CAPTURE_END_TOKENS}
    values: list[float] = []
    for i in range(length):
        token = next(tokens, None)
        if token is None or token.lower() in stops:
            raise ArgumentError(f"expected {length} values, input ended after {i}")
        values.append(parse_float(token))
    return values


def iter_pairs(tokens: Iterator[str]) -> Iterator[Tuple[float, float]]:
    """Consecutive ``a b`` pairs until the input runs out; a dangling token is ignored."""
    for first in tokens:
        second = next(tokens, None)
        if second is None:
            return
        yield parse_float(first), parse_float(second)


def format_value(value: float) -> str:
    if math.isnan(value):
        return "nan"
    return "%.10g" % value


def format_sequence(values: Iterable[float]) -> str:
    return " ".join(format_value(v) for v in values)


def _json_number(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ArgumentError(f"{where}: expected a number (got {value!r})")
    return float(value)


def ingest_samples(path: str | Path, value_column: str | None = None) -> List[float]:
    """Load samples from a JSON list, JSONL, CSV/Parquet table or whitespace text file."""

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Sample file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".jsonl":
        values = []
        for lineno, line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
            if not line.strip():
                continue
            obj = json.loads(line)
            if isinstance(obj, dict):
                if not value_column or value_column not in obj:
                    raise ArgumentError(f"{path}:{lineno}: record has no '{value_column}' field")
                obj = obj[value_column]
            values.append(_json_number(obj, f"{path}:{lineno}"))
        return values
    if suffix == ".json":
        loaded = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(loaded, dict) and isinstance(loaded.get("samples"), list):
            loaded = loaded["samples"]
        if not isinstance(loaded, list):
            raise ArgumentError("JSON sample file must contain a list of numbers")
        return [_json_number(x, f"{path}[{i}]") for i, x in enumerate(loaded)]
    if suffix in {".txt", ".dat", ""}:
        with path.open("r", encoding="utf-8") as handle:
            return list(iter_stream_values(tokenize(handle)))

    if suffix == ".parquet":
        df = pd.read_parquet(path)
    else:
        df = pd.read_csv(path)
    if value_column is None:
        numeric = df.select_dtypes("number").columns
        if not len(numeric):
            raise ArgumentError(f"no numeric column in {path}")
        value_column = numeric[0]
    if value_column not in df.columns:
        raise ArgumentError(f"column '{value_column}' not found in {path}")
    return df[value_column].astype(float).tolist()
