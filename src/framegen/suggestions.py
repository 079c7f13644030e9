"""Ranked crop proposals built from region, color, and composition analysis."""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .buffer import PixelBuffer
from .colors import ColorAnalyzer
from .regions import Region, RegionAnalyzer
from .scorer import CompositionScorer
from . import defaults


@dataclass(frozen=True)
class CropSuggestion:
    """Named crop proposal with a 0-100 score."""
    name: str
    description: str
    crop: Region
    score: float

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'description': self.description,
            'crop': self.crop.to_dict(),
            'score': self.score,
        }


BALANCED_CROP = Region(x=0.2, y=0.2, width=0.6, height=0.6)
DARK_IMAGE_CROP = Region(x=0.1, y=0.1, width=0.8, height=0.8)
THIRDS_CROP = Region(x=0.33, y=0.33, width=0.34, height=0.34)
GOLDEN_CROP_WIDTH = 0.6


class CropSuggestionEngine:
    """Implements crop suggestion strategies."""

    def __init__(
        self,
        region_analyzer: Optional[RegionAnalyzer] = None,
        color_analyzer: Optional[ColorAnalyzer] = None,
        scorer: Optional[CompositionScorer] = None,
        dark_threshold: float = defaults.DARK_IMAGE_BRIGHTNESS
    ):
        """
        Initialize suggestion engine.

        Args:
            region_analyzer: ROI finder (created if None)
            color_analyzer: Brightness source (created if None)
            scorer: Scores a caller-supplied crop (created if None)
            dark_threshold: Brightness below which the dark-image crop is offered
        """
        self.region_analyzer = region_analyzer or RegionAnalyzer()
        self.color_analyzer = color_analyzer or ColorAnalyzer()
        self.scorer = scorer or CompositionScorer()
        self.dark_threshold = dark_threshold

    def suggest(
        self,
        buffer: PixelBuffer,
        crop: Optional[Region] = None,
        edges: Optional[np.ndarray] = None,
        rois: Optional[List[Region]] = None,
        brightness: Optional[float] = None
    ) -> List[CropSuggestion]:
        """
        Generate crop suggestions, best first.

        Each call recomputes everything it is not handed. Suggestions with
        equal scores keep their generation order.

        Args:
            buffer: Source pixels
            crop: Current selection to score alongside the proposals
            edges: Precomputed edge map
            rois: Precomputed regions of interest
            brightness: Precomputed brightness in [0, 1]

        Returns:
            List of CropSuggestion sorted by descending score
        """
        if edges is None and (rois is None or crop is not None):
            edges = self.region_analyzer.edge_detector.detect(buffer)
        if rois is None:
            rois = self.region_analyzer.find_regions_of_interest(buffer, edges)
        if brightness is None:
            brightness = self.color_analyzer.brightness(buffer)

        suggestions = [
            CropSuggestion(
                name='Balanced Composition',
                description='Centered crop with balanced elements',
                crop=BALANCED_CROP,
                score=75,
            )
        ]

        if rois:
            suggestions.append(CropSuggestion(
                name='Focus on Interest',
                description='Crop focused on the most interesting region',
                crop=rois[0],
                score=85,
            ))

        if brightness < self.dark_threshold:
            suggestions.append(CropSuggestion(
                name='Dark Image Enhancement',
                description='Crop to emphasize brighter areas',
                crop=DARK_IMAGE_CROP,
                score=70,
            ))

        suggestions.append(CropSuggestion(
            name='Rule of Thirds',
            description='Classic composition following rule of thirds',
            crop=THIRDS_CROP,
            score=80,
        ))

        suggestions.append(CropSuggestion(
            name='Golden Ratio',
            description='Crop following the golden ratio',
            crop=self.golden_ratio_crop(),
            score=90,
        ))

        if crop is not None:
            composition = self.scorer.score(buffer, crop, edges)
            suggestions.append(CropSuggestion(
                name='Current Selection',
                description='Your current crop, scored against the composition rules',
                crop=crop,
                score=round(composition.overall * 100, 1),
            ))

        # list.sort is stable: equal scores keep generation order
        suggestions.sort(key=lambda s: s.score, reverse=True)
        return suggestions

    @staticmethod
    def golden_ratio_crop(width: float = GOLDEN_CROP_WIDTH) -> Region:
        """Crop of the given normalized width with height width / 1.618."""
        return Region(x=0.2, y=0.2, width=width, height=width / defaults.GOLDEN_RATIO)
