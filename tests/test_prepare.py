"""Tests for prepare: negative mining and the dataset builder."""

from __future__ import annotations

import logging
from pathlib import Path

import cv2
import pytest

from errors import FileAccessError
from fakes import FixedProposer, make_scene, write_image
from geometry import Rectangle
from prepare import DatasetBuilder, NegativeMiningPolicy, is_negative, mine_negatives


BOAT = Rectangle(20, 30, 40, 40)
WATER_LEFT = Rectangle(120, 30, 40, 40)
WATER_TOP = Rectangle(100, 0, 50, 25)
TINY = Rectangle(0, 0, 5, 5)


class TestMiningPolicy:

    def test_defaults(self):
        policy = NegativeMiningPolicy()
        policy.validate()
        assert policy.image_stride == 2
        assert policy.negatives_per_image == 4

    def test_selects_every_second_image(self):
        policy = NegativeMiningPolicy()
        assert [i for i in range(6) if policy.selects_image(i)] == [0, 2, 4]

    def test_invalid_stride(self):
        with pytest.raises(ValueError, match="image_stride"):
            NegativeMiningPolicy(image_stride=0).validate()


class TestMineNegatives:

    def test_touching_ground_truth_is_not_negative(self):
        assert not is_negative(Rectangle(50, 50, 20, 20), [BOAT])
        assert is_negative(WATER_LEFT, [BOAT])

    def test_no_ground_truth_everything_is_negative(self):
        assert is_negative(BOAT, [])

    def test_full_frame_ground_truth_yields_nothing(self):
        frame = Rectangle(0, 0, 200, 100)
        proposals = [BOAT, WATER_LEFT, WATER_TOP]
        assert mine_negatives(proposals, [frame]) == []

    def test_capped_in_proposal_order(self):
        proposals = [Rectangle(100 + i, 0, 10, 10) for i in range(10)]
        assert mine_negatives(proposals, [BOAT], max_negatives=4) == proposals[:4]

    def test_overlapping_proposals_skipped(self):
        proposals = [BOAT, WATER_LEFT, Rectangle(25, 35, 40, 40), WATER_TOP]
        assert mine_negatives(proposals, [BOAT]) == [WATER_LEFT, WATER_TOP]

    def test_zero_cap(self):
        assert mine_negatives([WATER_LEFT], [BOAT], max_negatives=0) == []


@pytest.fixture
def workspace(tmp_path):
    """Three annotated scenes with one boat each, plus output dirs."""
    image_dir = tmp_path / "images"
    annotation_dir = tmp_path / "annotations"
    annotation_dir.mkdir()
    for i in range(1, 4):
        name = f"image000{i}"
        write_image(image_dir / f"{name}.png", make_scene())
        (annotation_dir / f"{name}.txt").write_text("boat:20;60;30;70;\nhiddenboat:0;5;0;5;\n")
    return {
        "images": image_dir,
        "annotations": annotation_dir,
        "positives": tmp_path / "out" / "BOATS",
        "negatives": tmp_path / "out" / "NONBOATS",
    }


def _run(builder: DatasetBuilder, ws: dict):
    return builder.run(ws["images"], ws["annotations"], ws["positives"], ws["negatives"])


def _names(directory: Path) -> list[str]:
    return sorted(p.name for p in directory.iterdir())


class TestDatasetBuilder:

    def test_collect_pairs_by_name(self, workspace):
        builder = DatasetBuilder(proposer=FixedProposer([]))
        entries = builder.collect(workspace["images"], workspace["annotations"])
        assert [e.name for e in entries] == ["image0001", "image0002", "image0003"]
        assert entries[0].image_path == workspace["images"] / "image0001.png"
        assert entries[0].ground_truth == (BOAT,)

    def test_positives_from_every_image(self, workspace):
        builder = DatasetBuilder(proposer=FixedProposer([]))
        stats = _run(builder, workspace)
        assert _names(workspace["positives"]) == [
            "image0001_0.png",
            "image0002_0.png",
            "image0003_0.png",
        ]
        assert stats.images_processed == 3
        assert stats.positives_written == 3

    def test_negatives_from_every_second_image(self, workspace):
        proposer = FixedProposer([TINY, BOAT, WATER_LEFT, WATER_TOP])
        stats = _run(DatasetBuilder(proposer=proposer), workspace)
        assert _names(workspace["negatives"]) == [
            "image0001_0.png",
            "image0001_1.png",
            "image0003_0.png",
            "image0003_1.png",
        ]
        assert stats.negative_images_processed == 2
        assert stats.negatives_written == 4
        assert proposer.calls == 2

    def test_negatives_capped_per_image(self, workspace):
        proposer = FixedProposer([TINY, BOAT, WATER_LEFT, WATER_TOP])
        policy = NegativeMiningPolicy(negatives_per_image=1)
        stats = _run(DatasetBuilder(proposer=proposer, policy=policy), workspace)
        assert stats.negatives_written == 2

    def test_patches_are_normalized_grayscale(self, workspace):
        _run(DatasetBuilder(proposer=FixedProposer([WATER_LEFT])), workspace)
        patch = cv2.imread(str(workspace["positives"] / "image0001_0.png"), cv2.IMREAD_UNCHANGED)
        assert patch.ndim == 2
        assert patch.shape == (40, 40)

    def test_no_proposals_means_no_negatives(self, workspace):
        stats = _run(DatasetBuilder(proposer=FixedProposer([TINY])), workspace)
        assert stats.negatives_written == 0
        assert stats.negative_images_processed == 2
        assert stats.skipped == []

    def test_missing_image_is_skipped(self, workspace, caplog):
        (workspace["images"] / "image0002.png").unlink()
        with caplog.at_level(logging.WARNING):
            stats = _run(DatasetBuilder(proposer=FixedProposer([])), workspace)
        assert stats.images_processed == 2
        assert [name for name, _ in stats.skipped] == ["image0002"]
        assert "image0002" in caplog.text

    def test_unreadable_image_is_skipped(self, workspace):
        (workspace["images"] / "image0001.png").write_bytes(b"garbage")
        stats = _run(DatasetBuilder(proposer=FixedProposer([WATER_LEFT])), workspace)
        assert stats.images_processed == 2
        assert stats.negative_images_processed == 1
        assert len(stats.skipped) == 1
        assert stats.skipped[0][0] == "image0001"

    def test_stale_patches_are_reported(self, workspace, caplog):
        write_image(workspace["positives"] / "image0009_0.png", make_scene())
        with caplog.at_level(logging.WARNING):
            stats = _run(DatasetBuilder(proposer=FixedProposer([])), workspace)
        assert stats.positives_written == 3
        assert "already contains 1 patch" in caplog.text
        assert str(workspace["positives"]) in caplog.text

    def test_fresh_output_dirs_are_not_reported(self, workspace, caplog):
        with caplog.at_level(logging.WARNING):
            _run(DatasetBuilder(proposer=FixedProposer([])), workspace)
        assert "already contains" not in caplog.text

    def test_empty_annotation_dir_fails(self, workspace, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        workspace["annotations"] = empty
        with pytest.raises(FileAccessError, match="No files matching"):
            _run(DatasetBuilder(proposer=FixedProposer([])), workspace)

    def test_missing_image_dir_fails(self, workspace, tmp_path):
        workspace["images"] = tmp_path / "nowhere"
        with pytest.raises(FileAccessError, match="not a readable directory"):
            _run(DatasetBuilder(proposer=FixedProposer([])), workspace)

    def test_invalid_policy_rejected(self):
        with pytest.raises(ValueError):
            DatasetBuilder(proposer=FixedProposer([]), policy=NegativeMiningPolicy(image_stride=0))
