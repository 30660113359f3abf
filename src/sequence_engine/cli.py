"""Command line interface for the sequence engine."""

from __future__ import annotations

import argparse
import json
import logging
import math
import sys
from pathlib import Path
from typing import Any, Iterator, List, Sequence

from . import __version__
from .buffers import SequenceBuffer
from .capability import capability_report, online_capable
from .config import validate_job_file
from .errors import ArgumentError, SequenceEngineError, UnsupportedOperationError
from .logging_utils import configure_logging
from .models.params import OperatorParams, make_params
from .operators import OPERATOR_CONTRACTS, CombineOp, Operator, describe_operator, parse_operator
from .pipeline import run_combine, run_corr_window, run_job_file, run_transform
from .samples import (
    CAPTURE_END_TOKENS,
    format_sequence,
    format_value,
    ingest_samples,
    iter_pairs,
    iter_stream_values,
    parse_length,
    read_counted,
    read_counted_pair,
    read_fixed_span,
    tokenize,
)
from .streaming.driver import stream_iter

logger = logging.getLogger(__name__)


def _print_result(result: Any, as_json: bool) -> None:
    if as_json:
        print(json.dumps(result, indent=2))
    else:
        print(result)


def _write_output(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    print(f"Wrote result to {path}")


def _stdin_tokens() -> Iterator[str]:
    return tokenize(sys.stdin)


def _online_flag(online: bool) -> str:
    return f"ONLINE:{'YES' if online else 'NO'}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="seqops",
        description="Batch and streaming transforms over discrete sequences.",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON logs")

    subparsers = parser.add_subparsers(dest="command", required=True)

    transform = subparsers.add_parser("transform", help="Apply a single-sequence transform")
    transform.add_argument("operator", help=f"One of: {', '.join(op.value for op in Operator)}")
    transform.add_argument("params", nargs="*", help="MAIN and FILL parameters, as the operator requires")
    transform.add_argument("--mode", choices=("finite", "stream"), default="finite")
    transform.add_argument("--input", type=Path, help="Read samples from a JSON/JSONL/CSV/text file")
    transform.add_argument("--value-column", type=str, help="Column name for CSV inputs")
    transform.add_argument("--output", type=Path, help="Optional path to write the result JSON")
    transform.add_argument("--json", action="store_true", help="Emit the result as JSON")

    combine = subparsers.add_parser("combine", help="Combine two sequences read from stdin")
    combine.add_argument("operator", choices=[op.value for op in CombineOp])
    combine.add_argument("--output", type=Path, help="Optional path to write the result JSON")
    combine.add_argument("--json", action="store_true", help="Emit the result as JSON")

    corr = subparsers.add_parser("corr-window", help="Rolling normalized correlation of 'a b' pairs")
    corr.add_argument("window", nargs="?", help="Window size (read from stdin when omitted)")
    corr.add_argument("--json", action="store_true", help="Emit coefficients as JSON")

    capture = subparsers.add_parser("capture", help="Capture an indexed sequence from stdin and summarize it")
    capture.add_argument("--start", type=int, default=0, help="Logical index of the first sample (may be negative)")
    capture.add_argument("--length", type=int, help="Fixed length; read until END/STOP when omitted")
    capture.add_argument("--json", action="store_true", help="Emit the summary as JSON")

    capable = subparsers.add_parser("capable", help="Report online capability of operators")
    capable.add_argument("operator", nargs="?", help="Single operator to query")
    capable.add_argument("--finite", action="store_true", help="Assume a known-finite input")
    capable.add_argument("--json", action="store_true", help="Emit the report as JSON")

    operators = subparsers.add_parser("operators", help="List operators and their parameters")
    operators.add_argument("--json", action="store_true", help="Emit the list as JSON")

    validate = subparsers.add_parser("validate", help="Validate a job file")
    validate.add_argument("job", type=Path, help="Path to job file (YAML or JSON)")
    validate.add_argument("--json", action="store_true", help="Emit validation result as JSON")

    run = subparsers.add_parser("run", help="Validate and execute a job file")
    run.add_argument("job", type=Path, help="Path to job file (YAML or JSON)")
    run.add_argument("--output", type=Path, help="Optional path to write the result JSON")
    run.add_argument("--json", action="store_true", help="Emit the result as JSON")

    serve = subparsers.add_parser("serve", help="Run FastAPI service")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    subparsers.add_parser("version", help="Display the installed version")

    return parser


def _transform_params(operator: Operator, raw: List[str]) -> OperatorParams:
    contract = OPERATOR_CONTRACTS[operator]
    expected = int(contract.uses_main) + int(contract.uses_fill)
    if len(raw) != expected:
        names = [n for n in (contract.main_name, "fill" if contract.uses_fill else None) if n]
        raise ArgumentError(
            f"{operator.value} takes {expected} parameter(s) {names} (got {len(raw)})"
        )
    main = 0
    fill = 0.0
    if contract.uses_main:
        main = parse_length(raw[0])
    if contract.uses_fill:
        try:
            fill = float(raw[1])
        except ValueError as exc:
            raise ArgumentError(f"invalid fill parameter {raw[1]!r}") from exc
    return make_params(operator, main, fill)


def _run_stream_stdin(params: OperatorParams) -> None:
    """Emit stream output as soon as each sample produces it."""

    if not online_capable(params.op, assume_unbounded_input=True):
        print(_online_flag(False))
        raise UnsupportedOperationError(f"{params.op.value} is not realizable online for unbounded input")
    print(_online_flag(True), flush=True)
    try:
        for y in stream_iter(params, iter_stream_values(_stdin_tokens())):
            print(format_value(y), end=" ", flush=True)
    finally:
        print()


def _cmd_transform(args: argparse.Namespace) -> None:
    operator = parse_operator(args.operator)
    params = _transform_params(operator, args.params)

    if args.mode == "stream" and args.input is None and not (args.json or args.output):
        _run_stream_stdin(params)
        return

    if args.input is not None:
        samples = ingest_samples(args.input, value_column=args.value_column)
    elif args.mode == "finite":
        samples = read_counted(_stdin_tokens())
    else:
        samples = list(iter_stream_values(_stdin_tokens()))

    result = run_transform(params, samples, args.mode)
    if args.output:
        _write_output(args.output, result.as_dict())
    elif args.json:
        _print_result(result.as_dict(), as_json=True)
    else:
        print(_online_flag(result.online))
        print(format_sequence(result.values))


def _cmd_combine(args: argparse.Namespace) -> None:
    a, b = read_counted_pair(_stdin_tokens())
    result = run_combine(args.operator, a, b)
    if args.output:
        _write_output(args.output, result.as_dict())
    elif args.json:
        _print_result(result.as_dict(), as_json=True)
    else:
        print(len(result.values))
        print(format_sequence(result.values))


def _cmd_corr_window(args: argparse.Namespace) -> None:
    tokens = _stdin_tokens()
    raw = args.window if args.window is not None else next(tokens, None)
    if raw is None:
        raise ArgumentError("corr-window: missing window size")
    window = parse_length(raw)
    if window == 0:
        raise ArgumentError("corr-window: window size must be > 0")
    coefficients = run_corr_window(iter_pairs(tokens), window)
    if args.json:
        payload = [None if math.isnan(c) else c for c in coefficients]
        _print_result({"window": window, "coefficients": payload}, as_json=True)
    else:
        for c in coefficients:
            print(format_value(c))


def _render_summary(buffer: SequenceBuffer) -> str:
    lines = [
        "Sequence summary:",
        f"  start index: {buffer.start}",
        f"  length     : {len(buffer)}",
    ]
    if not len(buffer):
        lines.append("  values     : (empty sequence)")
        return "\n".join(lines)
    lines.append("  values     :")
    for index, value in zip(range(buffer.start, buffer.end), buffer):
        lines.append("    x[%d] = %.6g" % (index, value))
    return "\n".join(lines)


def _cmd_capture(args: argparse.Namespace) -> None:
    tokens = _stdin_tokens()
    if args.length is None:
        buffer = SequenceBuffer.growable(start=args.start)
        for value in iter_stream_values(tokens, CAPTURE_END_TOKENS):
            buffer.append(value)
    else:
        if args.length <= 0:
            raise ArgumentError(f"capture: length must be > 0 (got {args.length})")
        buffer = SequenceBuffer.fixed(args.length, start=args.start)
        for index, value in zip(range(buffer.start, buffer.end), read_fixed_span(tokens, args.length)):
            buffer.set(index, value)
    if args.json:
        _print_result(dict(buffer.summary()), as_json=True)
    else:
        print(_render_summary(buffer))


def _cmd_capable(args: argparse.Namespace) -> None:
    if args.operator:
        operator = parse_operator(args.operator)
        online = online_capable(operator, assume_unbounded_input=not args.finite)
        if args.json:
            _print_result(
                {"operator": operator.value, "finite": args.finite, "online": online}, as_json=True
            )
        else:
            print(_online_flag(online))
        return
    report = capability_report()
    if args.json:
        _print_result(report, as_json=True)
    else:
        for row in report:
            flag = row["finite"] if args.finite else row["unbounded"]
            print(f"{row['operator']}: {'YES' if flag else 'NO'}")


def _cmd_operators(args: argparse.Namespace) -> None:
    rows = [describe_operator(op) for op in Operator]
    if args.json:
        _print_result({"operators": rows, "combinations": [op.value for op in CombineOp]}, as_json=True)
        return
    for row in rows:
        params = " ".join(p for p in (row["main"] and f"<{row['main']}>", row["uses_fill"] and "<fill>") if p)
        print(f"{row['operator']:<11} {params:<20} {row['description']}")
    print("combinations: " + ", ".join(op.value for op in CombineOp))


def _dispatch(args: argparse.Namespace) -> int:
    if args.command == "transform":
        _cmd_transform(args)
    elif args.command == "combine":
        _cmd_combine(args)
    elif args.command == "corr-window":
        _cmd_corr_window(args)
    elif args.command == "capture":
        _cmd_capture(args)
    elif args.command == "capable":
        _cmd_capable(args)
    elif args.command == "operators":
        _cmd_operators(args)
    elif args.command == "validate":
        result = validate_job_file(args.job)
        _print_result(result.as_dict(), as_json=args.json)
        return 0 if result.ok else 1
    elif args.command == "run":
        payload = run_job_file(args.job)
        if args.output:
            _write_output(args.output, payload)
        elif args.json:
            _print_result(payload, as_json=True)
        else:
            result = payload["result"]
            print(_online_flag(result["online"]))
            print(format_sequence(result["values"]))
    elif args.command == "serve":
        from .service import create_app

        try:
            import uvicorn
        except ModuleNotFoundError:
            raise SystemExit("uvicorn is required to run the service. Install with `pip install sequence-engine[service]`.")
        uvicorn.run(create_app(), host=args.host, port=args.port)
    elif args.command == "version":
        print(__version__)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(level=args.log_level, json_logs=args.json_logs)

    try:
        return _dispatch(args)
    except SequenceEngineError as exc:
        logger.debug("command %s failed", args.command, exc_info=True)
        print(f"error: {exc.kind}: {exc}", file=sys.stderr)
    except (FileNotFoundError, ValueError) as exc:
        print(f"error: input: {exc}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
