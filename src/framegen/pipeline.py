"""Core pipeline orchestration for image composition analysis."""

from dataclasses import dataclass, field
from typing import Optional, List, Tuple

from .analyzer import CompositionAnalyzer, CompositionAnalysis
from .buffer import PixelBuffer
from .colors import ColorAnalyzer, DominantColor
from .edges import EdgeDetector
from .guides import fibonacci_grid, guide_score, rule_of_thirds_points
from .regions import Region, RegionAnalyzer, SubjectAnalysis
from .scorer import CompositionScorer
from .suggestions import CropSuggestion, CropSuggestionEngine
from .utils import validate_image, load_buffer
from . import defaults


@dataclass(frozen=True)
class ImageReport:
    """Everything the pipeline produced for one image."""
    dimensions: Tuple[int, int]  # (width, height) at analysis resolution
    regions_of_interest: List[Region]
    subjects: SubjectAnalysis
    dominant_colors: List[DominantColor]
    brightness: float
    color_harmony: float
    mood: float
    composition: CompositionAnalysis
    crop_suggestions: List[CropSuggestion]
    crop: Optional[Region] = None
    guide_score: Optional[float] = None  # 0-100, only when a crop is given

    def to_dict(self) -> dict:
        return {
            'dimensions': list(self.dimensions),
            'crop': self.crop.to_dict() if self.crop else None,
            'regions_of_interest': [r.to_dict() for r in self.regions_of_interest],
            'subjects': self.subjects.to_dict(),
            'dominant_colors': [c.to_dict() for c in self.dominant_colors],
            'brightness': self.brightness,
            'color_harmony': self.color_harmony,
            'mood': self.mood,
            'composition': self.composition.to_dict(),
            'crop_suggestions': [s.to_dict() for s in self.crop_suggestions],
            'guide_score': self.guide_score,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Result of analyzing an image file."""
    success: bool
    input_path: str
    report: Optional[ImageReport] = None
    error_message: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    skipped: bool = False  # report already existed; nothing was analyzed


class FrameAnalyzer:
    """Main composition analysis pipeline."""

    def __init__(
        self,
        max_size: int = defaults.ANALYSIS_MAX_SIZE,
        edge_detector: Optional[EdgeDetector] = None,
        region_analyzer: Optional[RegionAnalyzer] = None,
        color_analyzer: Optional[ColorAnalyzer] = None,
        scorer: Optional[CompositionScorer] = None
    ):
        """
        Initialize pipeline.

        Args:
            max_size: Longest side of the analysis resolution (0 = full size)
            edge_detector: Edge detector (created if None)
            region_analyzer: ROI and subject finder (created if None)
            color_analyzer: Color statistics (created if None)
            scorer: Composition rule scorer (created if None)
        """
        self.max_size = max_size
        self.edge_detector = edge_detector or EdgeDetector()
        self.region_analyzer = region_analyzer or RegionAnalyzer(edge_detector=self.edge_detector)
        self.color_analyzer = color_analyzer or ColorAnalyzer()
        self.scorer = scorer or CompositionScorer(edge_detector=self.edge_detector)
        self.composition_analyzer = CompositionAnalyzer(self.scorer, self.color_analyzer)
        self.suggestion_engine = CropSuggestionEngine(
            region_analyzer=self.region_analyzer,
            color_analyzer=self.color_analyzer,
            scorer=self.scorer,
        )

    def analyze(self, buffer: PixelBuffer, crop: Optional[Region] = None) -> ImageReport:
        """
        Run every analysis stage on one buffer.

        The edge map is computed once and shared by the downstream stages.

        Args:
            buffer: Source pixels
            crop: Optional candidate crop (normalized)

        Returns:
            ImageReport
        """
        edges = self.edge_detector.detect(buffer)
        rois = self.region_analyzer.find_regions_of_interest(buffer, edges)
        brightness = self.color_analyzer.brightness(buffer)

        return ImageReport(
            dimensions=buffer.size,
            crop=crop,
            guide_score=self.score_guides(buffer, crop),
            regions_of_interest=rois,
            subjects=self.region_analyzer.analyze_subjects(buffer, edges),
            dominant_colors=self.color_analyzer.dominant_colors(buffer),
            brightness=brightness,
            color_harmony=self.color_analyzer.color_harmony(buffer),
            mood=self.color_analyzer.mood(buffer),
            composition=self.composition_analyzer.analyze(buffer, crop, edges),
            crop_suggestions=self.suggestion_engine.suggest(
                buffer, crop=crop, edges=edges, rois=rois, brightness=brightness
            ),
        )

    @staticmethod
    def score_guides(buffer: PixelBuffer, crop: Optional[Region]) -> Optional[float]:
        """Score a crop against the Fibonacci grid and thirds points, in pixels."""
        if crop is None:
            return None
        width, height = buffer.size
        points = fibonacci_grid(width, height) + rule_of_thirds_points(width, height)
        x, y, w, h = crop.to_pixels(width, height)
        return guide_score(Region(x=x, y=y, width=w, height=h), points)

    def analyze_file(
        self,
        input_path: str,
        crop: Optional[Region] = None,
        verbose: bool = False
    ) -> AnalysisResult:
        """
        Decode and analyze an image file.

        Args:
            input_path: Path to input image
            crop: Optional candidate crop (normalized)
            verbose: Print processing details

        Returns:
            AnalysisResult with outcome details
        """
        if not validate_image(input_path):
            return AnalysisResult(
                success=False,
                input_path=input_path,
                error_message="Invalid or corrupted image file"
            )

        try:
            buffer = load_buffer(input_path, max_size=self.max_size)

            if verbose:
                print(f"Analysis resolution: {buffer.width}x{buffer.height}")

            warnings = []
            if buffer.is_degenerate:
                warnings.append("Image too small for edge detection; edge-based scores are neutral")
                if verbose:
                    print(warnings[-1])

            report = self.analyze(buffer, crop)

            if verbose:
                print(f"Regions of interest: {len(report.regions_of_interest)}")
                print(f"Subjects: {len(report.subjects.subjects)}")
                print(f"Overall score: {report.composition.overall_score:.3f}")

            return AnalysisResult(
                success=True,
                input_path=input_path,
                report=report,
                warnings=warnings,
            )

        except Exception as e:
            return AnalysisResult(
                success=False,
                input_path=input_path,
                error_message=str(e)
            )
