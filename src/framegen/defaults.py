"""Default configuration values shared across the analyzers, CLI, and batch runner."""

# Analysis resolution (longest side, pixels; 0 disables downscaling)
ANALYSIS_MAX_SIZE = 512

# Edge detection
SHARPNESS_EDGE_THRESHOLD = 30  # edges counted as "sharp" for focus/technical scores
INTEREST_EDGE_THRESHOLD = 20   # edges counted as "interesting" for visual interest
VISUAL_INTEREST_TARGET = 0.3   # fraction of interesting pixels that maxes the score

# Regions of interest
ROI_DENSITY_THRESHOLD = 10.0
ROI_MAX_REGIONS = 5

# Subject detection (skin tone)
SUBJECT_SAMPLE_STRIDE = 4
SUBJECT_GROUP_RADIUS = 50.0
SKIN_TONE_ACCEPT = 0.8
SKIN_TONE_REJECT = 0.1
SKIN_TONE_THRESHOLD = 0.6

# Color analysis
DOMINANT_COLOR_STRIDE = 10
DOMINANT_COLOR_COUNT = 5
COLOR_QUANTUM = 32
HARMONY_SAMPLE_STRIDE = 4
HARMONY_MAX_SAMPLES = 0  # optional cap on the O(n^2) pairwise pass; 0 keeps the exact stride
HARMONY_BLOCK_ROWS = 64  # distinct colors per cdist block
HARMONY_SIMILAR_DISTANCE = 50.0
HARMONY_COMPLEMENTARY_DISTANCE = 200.0

# Composition rules
GOLDEN_RATIO = 1.618
DEPTH_CONTRAST_THRESHOLD = 30
HOUGH_ANGLE_STEP = 5
HOUGH_DISTANCE_STEP = 10
HOUGH_SAMPLE_STRIDE = 2
HOUGH_LINE_TOLERANCE = 5.0
HOUGH_MIN_VOTES = 50
HOUGH_MAX_LINES = 5
HOUGH_FULL_SCORE_VOTES = 100.0

# Aggregate weights
TECHNICAL_WEIGHT = 0.3
ARTISTIC_WEIGHT = 0.3
COMPOSITION_WEIGHT = 0.4
FEEDBACK_THRESHOLD = 0.6  # below this a category is reported as a weakness

# Crop suggestions
DARK_IMAGE_BRIGHTNESS = 0.4

# Batch
WORKERS = 4
