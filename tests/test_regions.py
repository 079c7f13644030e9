"""Tests for regions module."""

import numpy as np
import pytest
from framegen.buffer import PixelBuffer
from framegen.regions import (
    Region,
    RegionAnalyzer,
    group_points,
    skin_tone_score,
)

SKIN = (220, 170, 140)


def make_step(width, height, step_x):
    array = np.zeros((height, width, 3), dtype=np.uint8)
    array[:, step_x:] = 255
    return PixelBuffer.from_array(array)


def test_region_helpers():
    """Test Region center, aspect and pixel conversion."""
    region = Region(x=0.2, y=0.2, width=0.6, height=0.3)
    assert region.center == pytest.approx((0.5, 0.35))
    assert region.aspect() == pytest.approx(2.0)
    assert region.aspect(100, 200) == pytest.approx(1.0)
    assert region.to_pixels(100, 200) == pytest.approx((20, 40, 60, 60))


def test_uniform_buffer_has_no_rois():
    """Test a flat image yields no regions of interest."""
    buffer = PixelBuffer.from_array(np.full((100, 100, 3), 77, dtype=np.uint8))
    assert RegionAnalyzer().find_regions_of_interest(buffer) == []


def test_rois_follow_edges():
    """Test ROIs cover the strong edge and are sorted by density."""
    buffer = make_step(100, 100, 50)
    rois = RegionAnalyzer().find_regions_of_interest(buffer)

    assert 0 < len(rois) <= 5
    scores = [r.score for r in rois]
    assert scores == sorted(scores, reverse=True)
    for roi in rois:
        assert roi.score > 10
        assert roi.x <= 0.49
        assert roi.x + roi.width >= 0.51
        assert roi.width == pytest.approx(0.25)
        assert roi.height == pytest.approx(0.25)
        assert 0 <= roi.y <= 1


def test_rois_tiny_buffer():
    """Test buffers with a zero-size window produce no ROIs."""
    buffer = PixelBuffer.from_array(np.zeros((3, 3, 3), dtype=np.uint8))
    assert RegionAnalyzer().find_regions_of_interest(buffer) == []


def test_skin_tone_score():
    """Test binary skin-tone classification."""
    assert skin_tone_score(*SKIN) == pytest.approx(0.8)
    assert skin_tone_score(0, 0, 255) == pytest.approx(0.1)
    assert skin_tone_score(0, 0, 0) == pytest.approx(0.1)


def test_group_points_seed_order():
    """Test points join the earliest seed they are near, not the nearest cluster."""
    xs = np.array([0, 45, 90])
    ys = np.array([0, 0, 0])
    scores = np.array([0.8, 0.8, 0.8])

    clusters = group_points(xs, ys, scores, 50)

    # 90 is only 45 from 45, but 45 was absorbed by the seed at 0
    assert len(clusters) == 2
    assert clusters[0].bounds == (0, 0, 45, 0)
    assert clusters[0].center == (22.5, 0.0)
    assert clusters[0].point_count == 2
    assert clusters[1].bounds == (90, 0, 90, 0)


def test_group_points_inclusive_radius():
    """Test the grouping radius is inclusive."""
    clusters = group_points([0, 50], [0, 0], [0.8, 0.8], 50)
    assert len(clusters) == 1


def test_detect_subjects_two_patches():
    """Test two separated skin patches form two clusters."""
    array = np.zeros((100, 100, 3), dtype=np.uint8)
    array[0:20, 0:20] = SKIN
    array[60:80, 60:80] = SKIN
    buffer = PixelBuffer.from_array(array)

    subjects = RegionAnalyzer().detect_subjects(buffer)

    assert len(subjects) == 2
    first, second = subjects
    assert first.bounds == (0, 0, 16, 16)
    assert first.center == (8.0, 8.0)
    assert first.point_count == 25
    assert first.confidence == pytest.approx(0.8)
    assert first.kind == 'face'
    assert second.bounds == (60, 60, 76, 76)


def test_detect_subjects_none():
    """Test no clusters without skin tones."""
    buffer = PixelBuffer.from_array(np.zeros((40, 40, 3), dtype=np.uint8))
    assert RegionAnalyzer().detect_subjects(buffer) == []


def test_analyze_subjects_summary():
    """Test subject analysis includes focus and composition summary."""
    buffer = PixelBuffer.from_array(np.full((40, 40, 3), 128, dtype=np.uint8))
    analysis = RegionAnalyzer().analyze_subjects(buffer)

    assert analysis.subjects == []
    assert analysis.focus_score == 0.0
    assert analysis.symmetry == pytest.approx(1.0)
    assert analysis.balance == pytest.approx(1.0)
    assert analysis.leading_lines == 0.0
    assert analysis.composition_score == pytest.approx(2 / 3)
    assert analysis.to_dict()['composition']['overall'] == pytest.approx(2 / 3)
