"""Tests for replay.py -- offline scoring of sample files."""

from __future__ import annotations

import json
from datetime import datetime, timezone

from sleepsense.analytics.pipeline import score_sample
from sleepsense.generator import generate_night
from sleepsense.replay import replay_file, summarize

from tests.conftest import FIXED_NOW, make_body, write_jsonl


class TestSummarize:
    def test_empty(self):
        assert summarize([])["count"] == 0

    def test_stats(self):
        records = [
            score_sample(make_body(heart_rate=70), now=FIXED_NOW),  # 95 REM
            score_sample(make_body(heart_rate=55), now=FIXED_NOW),  # 95 Deep
            score_sample(make_body(accel=(10.0, 0.0, 9.8), heart_rate=150), now=FIXED_NOW),  # 24 Awake
        ]
        stats = summarize(records)
        assert stats["count"] == 3
        assert stats["mean_score"] == 71.3
        assert stats["min_score"] == 24
        assert stats["max_score"] == 95
        assert stats["stages"] == {"REM": 1, "Deep": 1, "Awake": 1}


class TestReplayFile:
    def test_missing_file(self, tmp_path, capsys):
        assert replay_file(str(tmp_path / "nope.jsonl")) == []
        assert "File not found" in capsys.readouterr().out

    def test_scores_every_valid_line(self, tmp_path):
        path = write_jsonl(tmp_path / "samples.jsonl", [
            make_body(heart_rate=70, custom_timestamp="2026-02-13T22:00:00Z"),
            make_body(heart_rate=55, custom_timestamp="2026-02-13T22:01:00Z"),
        ])
        records = replay_file(str(path))
        assert [r.sleep_stage for r in records] == ["REM", "Deep"]
        assert records[1].server_timestamp == datetime(2026, 2, 13, 22, 1, tzinfo=timezone.utc)

    def test_skips_bad_lines(self, tmp_path, capsys):
        path = tmp_path / "samples.jsonl"
        with open(path, "w") as f:
            f.write(json.dumps(make_body(heart_rate=70)) + "\n")
            f.write("{not json\n")
            f.write("{}\n")
            f.write(json.dumps(make_body(custom_timestamp="garbage")) + "\n")
            f.write("\n")

        records = replay_file(str(path), verbose=True)
        out = capsys.readouterr().out
        assert len(records) == 1
        assert "Invalid JSON" in out
        assert "rejected" in out
        assert "4 samples, 1 scored, 3 rejected" in out

    def test_writes_output(self, tmp_path):
        night = generate_night(
            datetime(2026, 2, 13, 22, tzinfo=timezone.utc),
            datetime(2026, 2, 13, 22, 30, tzinfo=timezone.utc),
            seed=5,
        )
        path = write_jsonl(tmp_path / "night.jsonl", night)
        out_path = tmp_path / "scored.json"

        records = replay_file(str(path), str(out_path))
        docs = json.loads(out_path.read_text())
        assert len(docs) == len(records) == 31
        assert all(d["sleep_score"] == 95 for d in docs)
        assert all("custom_timestamp" not in d for d in docs)
