"""Tests for digest and canonical JSON helpers."""

from __future__ import annotations

from pathlib import Path

from dyadt.hashing import CHUNK_SIZE, canonical_dumps, sha256_bytes, sha256_file, sha256_text

EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
ABC_SHA256 = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


def test_known_digests() -> None:
    assert sha256_bytes(b"") == EMPTY_SHA256
    assert sha256_text("abc") == ABC_SHA256


def test_file_digest_matches_bytes_across_chunks(tmp_path: Path) -> None:
    payload = b"0123456789abcdef" * (CHUNK_SIZE // 8 + 3)
    target = tmp_path / "large.bin"
    target.write_bytes(payload)

    assert sha256_file(target) == sha256_bytes(payload)
    assert sha256_file(str(target)) == sha256_bytes(payload)


def test_canonical_dumps_is_order_independent() -> None:
    first = canonical_dumps({"b": 1, "a": {"y": [1, 2], "x": "é"}})
    second = canonical_dumps({"a": {"x": "é", "y": [1, 2]}, "b": 1})
    assert first == second == '{"a":{"x":"é","y":[1,2]},"b":1}'
