# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tests/test_buckets.py

"""Unit tests for level bucketing and serialization."""

import random
from collections import Counter
from pathlib import Path

import pytest

from snapdiff.buckets import BucketStore, bucketize_diff, serialize_buckets
from snapdiff.errors import MalformedStreamError, OutputError


def write_raw_pages(raw_dir: Path, pages: list[list[str]]) -> int:
    raw_dir.mkdir()
    for num, lines in enumerate(pages):
        (raw_dir / str(num)).write_text("".join(line + "\n" for line in lines))
    return len(pages)


@pytest.fixture
def dirs(tmp_path):
    buckets_dir = tmp_path / "parallel_diff"
    buckets_dir.mkdir()
    return tmp_path / "raw", buckets_dir, tmp_path / "serialized_diff"


class TestBucketizeDiff:

    def test_one_bucket_per_level(self, dirs):
        raw_dir, buckets_dir, _ = dirs
        count = write_raw_pages(raw_dir, [[
            "3 o1 FILE_C /a/b/c",
            "-2 o2 DIR_C /a",
            "3 o3 FILE_C /a/b/d",
            "0 o4 DIR_C /a/b",
        ]])
        with BucketStore(buckets_dir) as buckets:
            bucketize_diff(raw_dir, count, buckets)
            assert sorted(int(p.name) for p in buckets_dir.iterdir()) == [511, 513, 516]
            assert 516 in buckets and len(buckets) == 3

    def test_bucket_content_in_encounter_order(self, dirs):
        raw_dir, buckets_dir, _ = dirs
        count = write_raw_pages(raw_dir, [
            ["3 o1 FILE_C /x", "1 o2 DIR_C /d"],
            ["3 o3 FILE_M /y", "0 o3 EOF"],
        ])
        with BucketStore(buckets_dir) as buckets:
            bucketize_diff(raw_dir, count, buckets)
        assert (buckets_dir / "516").read_text() == "FILE_C\t/x\nFILE_M\t/y\n"

    def test_extra_tokens_tab_joined(self, dirs):
        raw_dir, buckets_dir, _ = dirs
        count = write_raw_pages(raw_dir, [["-2 obj9 SYM_CM /a/link /a/target"]])
        with BucketStore(buckets_dir) as buckets:
            bucketize_diff(raw_dir, count, buckets)
        assert (buckets_dir / "511").read_text() == "SYM_CM\t/a/link\t/a/target\n"

    def test_sentinel_dropped_and_rest_of_page_ignored(self, dirs):
        raw_dir, buckets_dir, _ = dirs
        count = write_raw_pages(raw_dir, [
            ["1 o1 FILE_C /kept", "0 o1 EOB", "1 o2 FILE_C /ignored"],
            ["1 o3 FILE_C /next", "0 o3 EOF"],
        ])
        with BucketStore(buckets_dir) as buckets:
            bucketize_diff(raw_dir, count, buckets)
        assert (buckets_dir / "514").read_text() == "FILE_C\t/kept\nFILE_C\t/next\n"
        assert not (buckets_dir / "513").exists()

    def test_bad_level_is_fatal(self, dirs):
        raw_dir, buckets_dir, _ = dirs
        count = write_raw_pages(raw_dir, [["x o1 FILE_C /a"]])
        with BucketStore(buckets_dir) as buckets:
            with pytest.raises(MalformedStreamError):
                bucketize_diff(raw_dir, count, buckets)

    def test_missing_raw_page_is_fatal(self, dirs):
        raw_dir, buckets_dir, _ = dirs
        count = write_raw_pages(raw_dir, [["1 o1 FILE_C /a"]])
        with BucketStore(buckets_dir) as buckets:
            with pytest.raises(MalformedStreamError):
                bucketize_diff(raw_dir, count + 1, buckets)

    def test_lossless(self, dirs):
        raw_dir, buckets_dir, _ = dirs
        rng = random.Random(7)
        pages = [
            [f"{rng.randint(-20, 20)} o{p}{i} FILE_C /f{rng.randint(0, 5)}"
             for i in range(50)]
            for p in range(3)
        ]
        count = write_raw_pages(raw_dir, pages)
        with BucketStore(buckets_dir) as buckets:
            bucketize_diff(raw_dir, count, buckets)
        expected = Counter(
            "\t".join(line.split()[2:]) for page in pages for line in page)
        found = Counter(
            line for p in buckets_dir.iterdir()
            for line in p.read_text().splitlines())
        assert found == expected


class TestSerializeBuckets:

    def test_ascending_level_order(self, dirs):
        raw_dir, buckets_dir, out_path = dirs
        rng = random.Random(11)
        lines = [f"{rng.randint(-513, 300)} o{i} FILE_C /f{i}" for i in range(200)]
        count = write_raw_pages(raw_dir, [lines])
        buckets = BucketStore(buckets_dir)
        bucketize_diff(raw_dir, count, buckets)
        serialize_buckets(buckets, out_path)

        level_of = {line.split()[3]: int(line.split()[0]) for line in lines}
        levels = [level_of[line.split("\t")[1]]
                  for line in out_path.read_text().splitlines()]
        assert len(levels) == 200
        assert levels == sorted(levels)

    def test_buckets_released_and_removed(self, dirs):
        raw_dir, buckets_dir, out_path = dirs
        count = write_raw_pages(raw_dir, [["2 o FILE_C /b", "-1 o DIR_C /a"]])
        buckets = BucketStore(buckets_dir)
        bucketize_diff(raw_dir, count, buckets)
        serialize_buckets(buckets, out_path)
        assert len(buckets) == 0
        assert list(buckets_dir.iterdir()) == []
        assert out_path.read_text() == "DIR_C\t/a\nFILE_C\t/b\n"

    def test_keep_buckets(self, dirs):
        raw_dir, buckets_dir, out_path = dirs
        count = write_raw_pages(raw_dir, [["2 o FILE_C /b"]])
        buckets = BucketStore(buckets_dir)
        bucketize_diff(raw_dir, count, buckets)
        serialize_buckets(buckets, out_path, keep_buckets=True)
        assert len(buckets) == 0
        assert (buckets_dir / "515").read_text() == "FILE_C\t/b\n"

    def test_output_failure_still_releases_buckets(self, dirs, tmp_path):
        raw_dir, buckets_dir, _ = dirs
        count = write_raw_pages(raw_dir, [["2 o FILE_C /b"]])
        buckets = BucketStore(buckets_dir)
        bucketize_diff(raw_dir, count, buckets)
        with pytest.raises(OutputError):
            serialize_buckets(buckets, tmp_path / "missing" / "serialized_diff")
        assert len(buckets) == 0

    def test_empty_store(self, dirs):
        _, buckets_dir, out_path = dirs
        serialize_buckets(BucketStore(buckets_dir), out_path)
        assert out_path.read_text() == ""
