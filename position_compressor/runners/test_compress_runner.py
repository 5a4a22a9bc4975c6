"""
Smoke test for the compress runner and its command line front end.
"""

import sys

from position_compressor.config.settings import CompressionConfig
from position_compressor.config.store import save_compression_config
from position_compressor.grouping.axis_grouper import collect_pieces
from position_compressor.runners.compress import main, needs_compression


def test_needs_compression():
    bound = 1000
    assert not needs_compression(collect_pieces({"1000,-1000": 2}), bound)
    assert needs_compression(collect_pieces({"0,0": 2, "1001,0": 19}), bound)
    assert needs_compression(collect_pieces({"0,-1001": 2}), bound)
    assert not needs_compression([], bound)

    print("  ✓ test_needs_compression: PASSED")


def test_cli_compress_and_expand(monkeypatch, capsys):
    monkeypatch.setattr(
        sys, "argv",
        ["compress", "K0,0|q5,3|R1000000,7", "--move", "0,0>17,0"],
    )
    main()

    out = capsys.readouterr().out
    print(out)
    assert "After:  K0,0|q5,3|R15,7" in out, f"Unexpected output:\n{out}"
    assert "Expanded move: 0,0>1000002,0" in out, f"Unexpected output:\n{out}"

    print("  ✓ test_cli_compress_and_expand: PASSED")


def test_cli_config_file(tmp_path, monkeypatch, capsys):
    path = tmp_path / "compression.json"
    save_compression_config(CompressionConfig(mode="diagonal", solver_backend="highs"), path)

    monkeypatch.setattr(
        sys, "argv",
        ["compress", "K0,0|q5,3|R1000000,7", "--config", str(path)],
    )
    main()

    out = capsys.readouterr().out
    assert "After:  K0,0|q5,3|R19,7" in out, f"Unexpected output:\n{out}"

    print("  ✓ test_cli_config_file: PASSED")


def test_cli_bad_move(monkeypatch):
    monkeypatch.setattr(
        sys, "argv",
        ["compress", "K0,0|R1000000,0", "--move", "3,3>4,4"],
    )
    try:
        main()
        raise AssertionError("Expected SystemExit for a move from an empty square")
    except SystemExit as e:
        assert e.code == 1, f"Expected exit code 1, got {e.code}"

    print("  ✓ test_cli_bad_move: PASSED")
