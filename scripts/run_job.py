"""CLI wrapper to execute a transform job file."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from sequence_engine.pipeline import run_job_file


def main() -> None:
    parser = argparse.ArgumentParser(description="Run a sequence transform job (YAML or JSON)")
    parser.add_argument("job", type=Path, help="Path to the job file")
    args = parser.parse_args()

    payload = run_job_file(args.job)
    result = payload["result"]
    print(f"{result['operator']} ({result['mode']}): {result['input_length']} -> {result['length']} samples")
    print(json.dumps(result["values"]))


if __name__ == "__main__":
    main()
