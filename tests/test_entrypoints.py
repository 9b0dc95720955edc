import logging

import cv2
import pytest

import boatdet
import cli.train
from logging_utils import resolve_log_level


@pytest.mark.parametrize("argv", [["--help"], ["build-dataset", "--help"], ["train", "--help"], ["detect", "--help"]])
def test_entrypoint_help(argv):
    with pytest.raises(SystemExit) as excinfo:
        boatdet.main(argv)

    assert excinfo.value.code == 0


def test_missing_arguments_exit_nonzero():
    with pytest.raises(SystemExit) as excinfo:
        boatdet.main(["detect", "test_dir"])

    assert excinfo.value.code != 0


def test_non_numeric_threshold_rejected():
    with pytest.raises(SystemExit) as excinfo:
        boatdet.main(["detect", "test", "annotations", "high"])

    assert excinfo.value.code != 0


def test_no_command_prints_help(capsys):
    assert boatdet.main([]) == 1
    assert "build-dataset" in capsys.readouterr().out


def test_train_with_empty_dirs_fails(tmp_path):
    (tmp_path / "BOATS").mkdir()
    (tmp_path / "NONBOATS").mkdir()
    argv = [
        "train",
        str(tmp_path / "BOATS"),
        str(tmp_path / "NONBOATS"),
        "--vocabulary", str(tmp_path / "vocabulary.yml"),
        "--model", str(tmp_path / "svm.yml"),
    ]
    assert boatdet.main(argv) == 1
    assert not (tmp_path / "vocabulary.yml").exists()


def test_train_opencv_failure_exits_nonzero(tmp_path, monkeypatch, caplog):
    def failing_train(positive_dir, negative_dir, config):
        raise cv2.error("kmeans failed")

    monkeypatch.setattr(cli.train, "train", failing_train)
    argv = [
        "train",
        str(tmp_path / "BOATS"),
        str(tmp_path / "NONBOATS"),
        "--vocabulary", str(tmp_path / "vocabulary.yml"),
        "--model", str(tmp_path / "svm.yml"),
    ]
    with caplog.at_level(logging.ERROR):
        assert boatdet.main(argv) == 1
    assert "kmeans failed" in caplog.text


def test_detect_without_trained_model_fails(tmp_path):
    argv = [
        "detect",
        str(tmp_path),
        str(tmp_path),
        "0.3",
        "--vocabulary", str(tmp_path / "vocabulary.yml"),
        "--model", str(tmp_path / "svm.yml"),
    ]
    assert boatdet.main(argv) == 1


def test_build_dataset_missing_image_dir_fails(tmp_path):
    argv = [
        "build-dataset",
        str(tmp_path / "missing"),
        str(tmp_path),
        "--positive-dir", str(tmp_path / "BOATS"),
        "--negative-dir", str(tmp_path / "NONBOATS"),
    ]
    assert boatdet.main(argv) == 1


@pytest.mark.parametrize(
    "log_level, verbose, quiet, expected",
    [
        (None, 0, 0, logging.INFO),
        (None, 1, 0, logging.DEBUG),
        (None, 0, 1, logging.WARNING),
        (None, 0, 2, logging.ERROR),
        ("debug", 0, 2, logging.DEBUG),
    ],
)
def test_resolve_log_level(log_level, verbose, quiet, expected):
    assert resolve_log_level(log_level, verbose, quiet) == expected
