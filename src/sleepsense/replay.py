"""Replay a JSON-lines file of sample bodies through the scoring pipeline offline."""

from __future__ import annotations

import json
import sys
from collections import Counter
from pathlib import Path

import numpy as np

from sleepsense.analytics.pipeline import score_sample
from sleepsense.errors import InvalidInput, InvalidTimestamp
from sleepsense.sample import EnrichedRecord


def summarize(records: list[EnrichedRecord]) -> dict:
    """Mean/min/max sleep score and a stage histogram for a batch of records."""
    if not records:
        return {"count": 0, "mean_score": 0.0, "min_score": 0, "max_score": 0, "stages": {}}

    scores = np.asarray([r.sleep_score for r in records], dtype=np.float64)
    return {
        "count": len(records),
        "mean_score": round(float(np.mean(scores)), 1),
        "min_score": int(np.min(scores)),
        "max_score": int(np.max(scores)),
        "stages": dict(Counter(r.sleep_stage for r in records)),
    }


def replay_file(
    samples_path: str,
    output_path: str | None = None,
    verbose: bool = False,
) -> list[EnrichedRecord]:
    """Score every sample in a .jsonl file.

    Args:
        samples_path: Path to a file with one JSON sample body per line.
        output_path: Optional path to write the scored records as a JSON array.
        verbose: If True, report skipped lines and why.

    Returns:
        List of scored records, in file order.
    """
    path = Path(samples_path)
    if not path.exists():
        print(f"File not found: {samples_path}")
        return []

    records: list[EnrichedRecord] = []
    total = 0
    rejected = 0

    print(f"Replaying {path.name}...\n")

    with open(path) as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue

            total += 1
            try:
                body = json.loads(line)
            except json.JSONDecodeError:
                rejected += 1
                if verbose:
                    print(f"  [line {line_num}] Invalid JSON, skipping")
                continue

            try:
                record = score_sample(body)
            except (InvalidInput, InvalidTimestamp) as e:
                rejected += 1
                if verbose:
                    print(f"  [line {line_num}] rejected: {e}")
                continue

            records.append(record)
            print(f"  [{record.server_timestamp.isoformat()}] "
                  f"score={record.sleep_score:3d} stage={record.sleep_stage}")

    stats = summarize(records)
    print(f"\nSummary: {total} samples, {len(records)} scored, {rejected} rejected")
    if records:
        print(f"  mean score {stats['mean_score']:.1f} "
              f"(min {stats['min_score']}, max {stats['max_score']})")
        for stage, count in sorted(stats["stages"].items()):
            print(f"  {stage:<6} {count}")

    if output_path:
        with open(output_path, "w") as out:
            json.dump([r.to_dict() for r in records], out, indent=2)
        print(f"Output written to {output_path}")

    return records


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python -m sleepsense.replay <samples.jsonl> [output.json]")
        sys.exit(1)

    samples_path = sys.argv[1]
    output_path = sys.argv[2] if len(sys.argv) > 2 and not sys.argv[2].startswith("-") else None
    verbose = "--verbose" in sys.argv or "-v" in sys.argv

    replay_file(samples_path, output_path, verbose)


if __name__ == "__main__":
    main()
