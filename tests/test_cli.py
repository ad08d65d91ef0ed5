# tests/test_cli.py
"""
Command-line runner.

Covers both subcommands end to end on tiny vector files, the optional
listings, threshold sweeps, and the exit status for failed training and
usage errors.
"""

from __future__ import annotations

import re

import pytest

from clusterfetch.cli import main, build_parser

from data_gen import repeat_patterns, interleave_patterns

A = [1, 1, 0, 0]
B = [0, 0, 1, 0]


@pytest.fixture
def kmeans_files(vector_file):
    rows = repeat_patterns([A, B], [3, 2]).astype(int).tolist()
    return vector_file("train.dat", rows), vector_file("test.dat", rows)


@pytest.fixture
def kohonen_files(vector_file):
    rows = interleave_patterns([[1, 1, 0, 0], [0, 0, 1, 1]], rounds=4).astype(int).tolist()
    return vector_file("train.dat", rows), vector_file("test.dat", rows)


def test_kmeans_run(kmeans_files, capsys):
    train, test = kmeans_files
    status = main(["kmeans", "--train", str(train), "--test", str(test),
                   "--clusters", "2", "--seed", "0"])
    assert status == 0

    out = capsys.readouterr().out
    assert "Prefetch threshold=0.5" in out
    assert "Hitrate: 1.0" in out
    assert "Accuracy: 1.0" in out
    assert "Hitrate+Accuracy=2.0" in out
    assert "Initial learning Rate" not in out


def test_kohonen_run(kohonen_files, capsys):
    train, test = kohonen_files
    status = main(["kohonen", "--train", str(train), "--test", str(test),
                   "--map-size", "2", "--epochs", "10", "--seed", "3"])
    assert status == 0

    out = capsys.readouterr().out
    assert "Initial learning Rate=0.8" in out
    assert "Hitrate: 1.0" in out
    assert "Accuracy: 1.0" in out


def test_show_members_and_prototypes(kohonen_files, capsys):
    train, test = kohonen_files
    main(["kohonen", "--train", str(train), "--test", str(test),
          "--map-size", "2", "--epochs", "10", "--seed", "0",
          "--show-members", "--show-prototypes"])

    out = capsys.readouterr().out
    assert len(re.findall(r"^Members cluster\[\d\]\[\d\] :", out, re.M)) == 4
    assert len(re.findall(r"^Prototype cluster\[\d\]\[\d\] : ", out, re.M)) == 4


def test_kmeans_member_listing(kmeans_files, capsys):
    train, test = kmeans_files
    main(["kmeans", "--train", str(train), "--test", str(test),
          "--clusters", "2", "--seed", "1", "--show-members"])

    out = capsys.readouterr().out
    listed = re.findall(r"^Members cluster\[(\d)\] :\[(.*)\]$", out, re.M)
    assert sorted(members for _, members in listed) == ["0, 1, 2", "3, 4"]


def test_sweep_table(kmeans_files, capsys):
    train, test = kmeans_files
    main(["kmeans", "--train", str(train), "--test", str(test),
          "--clusters", "2", "--seed", "0", "--sweep", "0.25", "2.0"])

    out = capsys.readouterr().out
    assert "threshold" in out and "combined" in out
    assert re.search(r"^\s+2\.000\s+0\.0000\s+0\.0000\s+0\.0000$", out, re.M)


def test_threshold_and_delimiter(vector_file, capsys):
    rows = repeat_patterns([A, B], [3, 2]).astype(int).tolist()
    train = vector_file("train.csv", rows, delimiter=",")
    test = vector_file("test.csv", rows, delimiter=",")

    status = main(["kmeans", "--train", str(train), "--test", str(test), "--delimiter", ",",
                   "--clusters", "2", "--threshold", "0.75", "--dim", "4", "--seed", "0"])
    assert status == 0
    assert "Prefetch threshold=0.75" in capsys.readouterr().out


def test_empty_training_file_fails(vector_file, tmp_path, capsys):
    train = tmp_path / "train.dat"
    train.write_text("")
    test = vector_file("test.dat", [A])

    status = main(["kmeans", "--train", str(train), "--test", str(test), "--clusters", "2"])
    assert status == 1
    assert "Training failed" in capsys.readouterr().err


def test_usage_errors(kmeans_files, tmp_path):
    train, test = kmeans_files

    with pytest.raises(SystemExit) as exc:
        main(["kmeans", "--train", str(train), "--test", str(test)])
    assert exc.value.code == 2

    with pytest.raises(SystemExit) as exc:
        main(["kmeans", "--train", str(tmp_path / "missing.dat"), "--test", str(test),
              "--clusters", "2"])
    assert exc.value.code == 2

    with pytest.raises(SystemExit) as exc:
        main(["kmeans", "--train", str(train), "--test", str(test), "--clusters", "0"])
    assert exc.value.code == 2

    with pytest.raises(SystemExit) as exc:
        main(["gmm", "--train", str(train), "--test", str(test)])
    assert exc.value.code == 2


def test_parser_defaults():
    args = build_parser().parse_args(["kohonen", "--train", "a", "--test", "b",
                                      "--map-size", "3", "--epochs", "5"])
    assert args.threshold == 0.5
    assert args.learning_rate == 0.8
    assert args.delimiter is None
    assert args.verbose == 0
    assert args.sweep is None
