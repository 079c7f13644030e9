"""Tests for scorer module."""

import numpy as np
import pytest
from framegen.buffer import PixelBuffer
from framegen.regions import Region
from framegen.scorer import CompositionRule, CompositionScore, CompositionScorer


def solid(color, width=60, height=60):
    return PixelBuffer.from_array(np.full((height, width, 3), color, dtype=np.uint8))


def halves(left, right, width=60, height=60):
    array = np.zeros((height, width, 3), dtype=np.uint8)
    array[:, :width // 2] = left
    array[:, width // 2:] = right
    return PixelBuffer.from_array(array)


def test_uniform_buffer_scores():
    """Test neutral and perfect scores on a flat gray frame."""
    score = CompositionScorer().score(solid((128, 128, 128)))

    assert score.rule_of_thirds == 0.5
    assert score.golden_ratio == 0.5
    assert score.symmetry == pytest.approx(1.0)
    assert score.balance == pytest.approx(1.0)
    assert score.leading_lines == 0.0
    assert score.depth == 0.0
    assert score.overall == pytest.approx(3.0 / 6)


def test_rule_of_thirds_at_intersection():
    """Test crop centered on a thirds intersection scores 1.0."""
    buffer = solid((0, 0, 0), 90, 90)
    crop = Region(x=1 / 3 - 0.1, y=2 / 3 - 0.1, width=0.2, height=0.2)
    assert CompositionScorer().rule_of_thirds(buffer, crop) == pytest.approx(1.0)


def test_rule_of_thirds_center_crop():
    """Test a centered crop scores below an intersection crop."""
    buffer = solid((0, 0, 0), 90, 90)
    centered = Region(x=0.4, y=0.4, width=0.2, height=0.2)
    # Center is 21.2px from every intersection, falloff is 22.5px
    score = CompositionScorer().rule_of_thirds(buffer, centered)
    assert 0.0 < score < 0.1


def test_golden_ratio_crop():
    """Test golden ratio scoring on pixel aspect."""
    buffer = solid((0, 0, 0), 100, 100)
    scorer = CompositionScorer()
    golden = Region(x=0.2, y=0.2, width=0.6, height=0.6 / 1.618)
    square = Region(x=0.2, y=0.2, width=0.5, height=0.5)

    assert scorer.golden_ratio(buffer, golden) == pytest.approx(1.0)
    assert scorer.golden_ratio(buffer, square) == pytest.approx(1 - 0.618 / 1.618)
    assert scorer.golden_ratio(buffer, Region(0, 0, 0.5, 0.0)) == 0.0


def test_symmetry_mirror_opposites():
    """Test black/white halves are fully asymmetric."""
    scorer = CompositionScorer()
    assert scorer.symmetry(halves((0, 0, 0), (255, 255, 255))) == pytest.approx(0.0)


def test_symmetry_odd_width():
    """Test the middle column of an odd-width image pairs with itself."""
    array = np.zeros((4, 3, 3), dtype=np.uint8)
    array[:, 2] = 255
    # Pairs: (col0, col2) diff 1, (col1, col1) diff 0
    score = CompositionScorer().symmetry(PixelBuffer.from_array(array))
    assert score == pytest.approx(0.5)


def test_symmetry_uses_luma():
    """Test pure red and green mirror halves differ by their luma."""
    score = CompositionScorer().symmetry(halves((255, 0, 0), (0, 255, 0)))
    assert score == pytest.approx(1 - (0.587 - 0.299))


def test_balance_half_white():
    """Test all visual weight on one side."""
    score = CompositionScorer().balance(halves((255, 255, 255), (0, 0, 0)))
    assert score == pytest.approx(0.75)


def test_balance_black_frame():
    """Test zero total weight counts as balanced."""
    assert CompositionScorer().balance(solid((0, 0, 0))) == 1.0


def test_depth_contrast():
    """Test channel-difference contrast fraction."""
    scorer = CompositionScorer()
    assert scorer.depth(solid((255, 0, 0))) == 1.0
    assert scorer.depth(halves((255, 0, 0), (50, 50, 50))) == pytest.approx(0.5)


def test_leading_lines_vertical_edge():
    """Test a strong vertical edge is found as a 0 degree line."""
    array = np.zeros((200, 200, 3), dtype=np.uint8)
    array[:, 100:] = 255
    buffer = PixelBuffer.from_array(array)
    scorer = CompositionScorer()

    lines = scorer.detect_leading_lines(buffer)

    assert 0 < len(lines) <= 5
    assert (lines[0].angle, lines[0].distance, lines[0].votes) == (0, 100, 99)
    assert all(line.votes >= 50 for line in lines)
    assert scorer.leading_lines(buffer) == pytest.approx(0.99)


def test_leading_lines_none():
    """Test no qualifying line scores zero."""
    assert CompositionScorer().detect_leading_lines(solid((9, 9, 9))) == []


def test_evaluate_each_rule():
    """Test every enumerated rule is dispatched."""
    buffer = solid((30, 60, 90))
    scorer = CompositionScorer()
    score = scorer.score(buffer)
    for rule in CompositionRule:
        assert scorer.evaluate(rule, buffer) == pytest.approx(score.get(rule))


def test_scores_within_unit_range():
    """Test all scores stay in [0, 1] on noisy input and odd crops."""
    rng = np.random.default_rng(42)
    buffer = PixelBuffer.from_array(rng.integers(0, 256, (64, 80, 3), dtype=np.uint8))
    scorer = CompositionScorer()

    for crop in (None, Region(0, 0, 1, 1), Region(0.9, 0.9, 0.5, 0.01), Region(0.1, 0.5, 0.05, 0.4)):
        score = scorer.score(buffer, crop)
        for value in score.to_dict().values():
            assert 0.0 <= value <= 1.0

    assert 0.0 <= scorer.technical_score(buffer) <= 1.0
    assert 0.0 <= scorer.artistic_score(buffer) <= 1.0


def test_technical_score_mid_gray():
    """Test a flat mid-gray frame: no sharpness, ideal exposure, no noise."""
    score = CompositionScorer().technical_score(solid((127, 128, 128)))
    # exposure = 127.67/255, close to 0.5
    assert score == pytest.approx(0.4 * (1 - abs(127.666666 / 255 - 0.5) * 2) + 0.2, abs=1e-4)


def test_composition_score_dict():
    """Test serialized breakdown includes overall."""
    score = CompositionScore(1, 1, 1, 1, 1, 0.4)
    assert score.to_dict()['overall'] == pytest.approx(0.9)
