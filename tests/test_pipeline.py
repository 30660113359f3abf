from __future__ import annotations

import json
import logging
import math
from pathlib import Path

import pandas as pd
import pytest

from sequence_engine.config import load_job_config, validate_job, validate_job_file
from sequence_engine.errors import ArgumentError, UnsupportedOperationError
from sequence_engine.logging_utils import log_event
from sequence_engine.models import JobConfig, make_params
from sequence_engine.pipeline import run_combine, run_corr_window, run_job, run_job_file, run_transform
from sequence_engine.samples import format_sequence, ingest_samples, iter_stream_values, read_counted


def test_finite_mode_reports_finite_capability() -> None:
    result = run_transform(make_params("reverse"), [1.0, 2.0, 3.0], "finite")
    assert result.online is True
    assert result.values == [3.0, 2.0, 1.0]
    assert result.as_dict()["length"] == 3


def test_stream_mode_rejects_non_causal_operator() -> None:
    with pytest.raises(UnsupportedOperationError):
        run_transform(make_params("advance", 1), [1.0, 2.0], "stream")


def test_stream_mode_runs_through_stream_state() -> None:
    result = run_transform(make_params("pad-front", 2), [1.0, 2.0], "stream")
    assert result.online is True
    assert result.values == [0.0, 0.0, 1.0, 2.0]


def test_unknown_mode_is_argument_error() -> None:
    with pytest.raises(ArgumentError):
        run_transform(make_params("diff"), [1.0], "batch")  # type: ignore[arg-type]


def test_combine_and_correlation_records() -> None:
    combined = run_combine("conv-linear", [1.0, 2.0], [3.0, 4.0])
    assert combined.as_dict() == {
        "operator": "conv-linear",
        "a_length": 2,
        "b_length": 2,
        "length": 3,
        "values": [3.0, 10.0, 8.0],
    }

    coefficients = run_corr_window([(1.0, 1.0), (2.0, 2.0)], 2)
    assert math.isnan(coefficients[0])
    assert coefficients[1] == pytest.approx(1.0)


def test_transform_logs_structured_event(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="sequence_engine.pipeline"):
        run_transform(make_params("cumsum"), [1.0, 1.0], "finite")
    assert any("transform_complete" in record.getMessage() for record in caplog.records)


def test_log_event_emits_json(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("sequence_engine.test")
    with caplog.at_level(logging.INFO, logger="sequence_engine.test"):
        log_event(logger, "stream_complete", json_logs=True, operator="delay")
    payload = json.loads(caplog.records[-1].getMessage())
    assert payload == {"event": "stream_complete", "operator": "delay"}


def test_validate_job_applies_defaults_and_warns() -> None:
    result = validate_job({"operator": "reverse", "main": 3, "samples": [1, 2], "colour": "red"})
    assert result.ok
    assert result.normalized["mode"] == "finite"
    assert result.normalized["fill"] == 0.0
    assert any("'main' is ignored" in w for w in result.warnings)
    assert any("Unknown field 'colour'" in w for w in result.warnings)


def test_validate_job_reports_errors() -> None:
    missing = validate_job({"samples": [1.0]})
    assert not missing.ok and "operator" in missing.errors[0]

    unknown = validate_job({"operator": "rotate", "samples": [1.0]})
    assert any("Unknown operator" in e for e in unknown.errors)

    bad_factor = validate_job({"operator": "downsample", "main": 0, "samples": [1.0]})
    assert any("factor" in e for e in bad_factor.errors)

    no_source = validate_job({"operator": "diff"})
    assert any("samples" in e for e in no_source.errors)


def test_yaml_job_with_csv_input(tmp_path: Path) -> None:
    pd.DataFrame({"t": [0, 1, 2, 3], "value": [1.0, 2.0, 4.0, 8.0]}).to_csv(tmp_path / "data.csv", index=False)
    job_path = tmp_path / "job.yml"
    job_path.write_text(
        "\n".join(["operator: diff", "mode: stream", "input: data.csv", "value_column: value"]),
        encoding="utf-8",
    )

    config = load_job_config(job_path)
    assert Path(config["input"]) == tmp_path / "data.csv"
    assert validate_job_file(job_path).ok

    payload = run_job_file(job_path)
    assert payload["result"]["values"] == [1.0, 1.0, 2.0, 4.0]
    assert payload["result"]["mode"] == "stream"


def test_run_job_with_inline_samples() -> None:
    job = JobConfig(operator="upsample", main=2, samples=[1.0, 2.0])
    assert run_job(job).values == [1.0, 0.0, 2.0, 0.0]


def test_run_job_file_rejects_invalid_job(tmp_path: Path) -> None:
    job_path = tmp_path / "job.json"
    job_path.write_text(json.dumps({"operator": "upsample", "main": 0, "samples": [1.0]}), encoding="utf-8")
    with pytest.raises(ArgumentError):
        run_job_file(job_path)


def test_load_job_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_job_config(tmp_path / "missing.yml")


def test_ingest_samples_formats(tmp_path: Path) -> None:
    json_path = tmp_path / "s.json"
    json_path.write_text(json.dumps([1, 2.5, 3]), encoding="utf-8")
    assert ingest_samples(json_path) == [1.0, 2.5, 3.0]

    jsonl_path = tmp_path / "s.jsonl"
    jsonl_path.write_text('{"v": 1}\n{"v": -2}\n', encoding="utf-8")
    assert ingest_samples(jsonl_path, value_column="v") == [1.0, -2.0]

    text_path = tmp_path / "s.txt"
    text_path.write_text("1 2\n3 end 4\n", encoding="utf-8")
    assert ingest_samples(text_path) == [1.0, 2.0, 3.0]


def test_ingest_samples_rejects_non_numeric_json_entries(tmp_path: Path) -> None:
    json_path = tmp_path / "s.json"
    json_path.write_text(json.dumps([1.0, "2.5", None, 3.0]), encoding="utf-8")
    with pytest.raises(ArgumentError, match=r"s\.json\[1\]"):
        ingest_samples(json_path)

    nested = tmp_path / "nested.json"
    nested.write_text(json.dumps({"samples": [1.0, True]}), encoding="utf-8")
    with pytest.raises(ArgumentError, match=r"nested\.json\[1\]"):
        ingest_samples(nested)

    jsonl_path = tmp_path / "s.jsonl"
    jsonl_path.write_text('1.0\n{"v": 2.0}\n3.0\n', encoding="utf-8")
    with pytest.raises(ArgumentError, match=r"s\.jsonl:2"):
        ingest_samples(jsonl_path)

    jsonl_path.write_text('1.0\n"x"\n', encoding="utf-8")
    with pytest.raises(ArgumentError, match=r"s\.jsonl:2"):
        ingest_samples(jsonl_path, value_column="v")


def test_token_readers() -> None:
    assert read_counted(iter(["3", "1", "2", "3", "99"])) == [1.0, 2.0, 3.0]
    with pytest.raises(ArgumentError):
        read_counted(iter(["3", "1"]))
    with pytest.raises(ArgumentError):
        list(iter_stream_values(["1", "x"]))
    assert list(iter_stream_values(["1", "End", "2"])) == [1.0]


def test_format_sequence_uses_ten_significant_digits() -> None:
    assert format_sequence([1.0, 0.1 + 0.2, 1e-12, float("nan")]) == "1 0.3 1e-12 nan"


def test_stream_event_carries_timing(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.setenv("SEQENGINE_JSON_LOGS", "true")
    with caplog.at_level(logging.INFO, logger="sequence_engine.pipeline"):
        run_transform(make_params("diff"), [3.0, 5.0], "stream")
    events = [json.loads(r.getMessage()) for r in caplog.records if r.getMessage().startswith("{")]
    stream_events = [e for e in events if e["event"] == "stream_complete"]
    assert stream_events and stream_events[-1]["output_length"] == 2
    assert stream_events[-1]["elapsed_ms"] >= 0.0
