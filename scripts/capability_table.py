"""Print the online-capability table for every transform."""

from __future__ import annotations

from sequence_engine.capability import capability_report


def main() -> None:
    print(f"{'operator':<11} {'unbounded':<10} finite")
    for row in capability_report():
        print(f"{row['operator']:<11} {'yes' if row['unbounded'] else 'no':<10} {'yes' if row['finite'] else 'no'}")


if __name__ == "__main__":
    main()
