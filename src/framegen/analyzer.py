"""Aggregate composition analysis with written feedback."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from .buffer import PixelBuffer
from .colors import ColorAnalyzer
from .regions import Region
from .scorer import CompositionScorer, CompositionScore
from . import defaults


@dataclass(frozen=True)
class CompositionAnalysis:
    """Technical, artistic, and composition scores with feedback."""
    technical_score: float
    artistic_score: float
    composition_score: float
    overall_score: float
    breakdown: Optional[CompositionScore] = None
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'technical_score': self.technical_score,
            'artistic_score': self.artistic_score,
            'composition_score': self.composition_score,
            'overall_score': self.overall_score,
            'breakdown': self.breakdown.to_dict() if self.breakdown else None,
            'strengths': list(self.strengths),
            'weaknesses': list(self.weaknesses),
            'suggestions': list(self.suggestions),
        }


class CompositionAnalyzer:
    """Scores an image (or crop) and explains the result."""

    def __init__(
        self,
        scorer: Optional[CompositionScorer] = None,
        color_analyzer: Optional[ColorAnalyzer] = None,
        feedback_threshold: float = defaults.FEEDBACK_THRESHOLD
    ):
        """
        Initialize composition analyzer.

        Args:
            scorer: Composition rule scorer (created if None)
            color_analyzer: Color statistics for the artistic score (created if None)
            feedback_threshold: Category scores below this are reported as weaknesses
        """
        self.scorer = scorer or CompositionScorer()
        self.color_analyzer = color_analyzer or ColorAnalyzer()
        self.feedback_threshold = feedback_threshold

    def analyze(
        self,
        buffer: PixelBuffer,
        crop: Optional[Region] = None,
        edges: Optional[np.ndarray] = None
    ) -> CompositionAnalysis:
        """
        Run the full composition analysis.

        Args:
            buffer: Source pixels
            crop: Candidate crop (normalized), or None for the whole frame
            edges: Precomputed edge map, detected from buffer if None

        Returns:
            CompositionAnalysis; overall is 0.3 technical + 0.3 artistic
            + 0.4 composition
        """
        if edges is None:
            edges = self.scorer.edge_detector.detect(buffer)

        breakdown = self.scorer.score(buffer, crop, edges)
        technical = self.scorer.technical_score(buffer, edges)
        artistic = self.scorer.artistic_score(buffer, edges, self.color_analyzer)
        composition = breakdown.overall

        overall = (
            technical * defaults.TECHNICAL_WEIGHT +
            artistic * defaults.ARTISTIC_WEIGHT +
            composition * defaults.COMPOSITION_WEIGHT
        )
        overall = max(0.0, min(1.0, overall))
        strengths, weaknesses, suggestions = self._feedback(
            technical, artistic, composition, overall
        )

        return CompositionAnalysis(
            technical_score=technical,
            artistic_score=artistic,
            composition_score=composition,
            overall_score=overall,
            breakdown=breakdown,
            strengths=strengths,
            weaknesses=weaknesses,
            suggestions=suggestions,
        )

    def _feedback(
        self,
        technical: float,
        artistic: float,
        composition: float,
        overall: float
    ) -> Tuple[List[str], List[str], List[str]]:
        """Strengths, weaknesses, and suggestions for each category."""
        threshold = self.feedback_threshold
        strengths = []
        weaknesses = []
        suggestions = []

        if technical < threshold:
            weaknesses.append('Image could benefit from better technical quality')
            suggestions.append('Consider improving focus and exposure')
        else:
            strengths.append('Good technical quality')

        if artistic < threshold:
            weaknesses.append('Color harmony could be improved')
            suggestions.append('Try adjusting color balance or applying filters')
        else:
            strengths.append('Strong artistic appeal')

        if composition < threshold:
            weaknesses.append('Composition could be enhanced')
            suggestions.append('Consider using rule of thirds or golden ratio')
        else:
            strengths.append('Excellent composition')

        if overall >= 0.8:
            suggestions.append('This is a well-composed image!')
        elif overall >= 0.6:
            suggestions.append('Good image with room for improvement')
        else:
            suggestions.append('Consider recomposing or editing the image')

        return strengths, weaknesses, suggestions
