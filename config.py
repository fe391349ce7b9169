"""Central configuration for meter reading detection.

All tunable parameters are defined here with descriptive names.
Frozen config dataclasses take their defaults from this module, and the CLI
can override the thresholds per invocation.
"""

from pathlib import Path

# =============================================================================
# MODEL CONTRACT
# =============================================================================

# Side length of the square model input (pixels)
INPUT_SIZE = 640

# Number of anchor columns in the raw output tensor
NUM_ANCHORS = 8400

# Box rows at the top of the raw output tensor (cx, cy, w, h)
BOX_ROWS = 4

# =============================================================================
# CLASS LABELS
# =============================================================================

# Closed, ordered label set. Index 0 is the decimal point, 1..10 are the
# digits 0..9 and the last entry is the unit marker.
CLASS_NAMES = (".", "0", "1", "2", "3", "4", "5", "6", "7", "8", "9", "kwh")

NUM_CLASSES = len(CLASS_NAMES)

DECIMAL_POINT_CLASS_ID = 0
UNIT_LABEL_CLASS_ID = 11

# Inclusive class id range that contributes characters to a reading
READING_CLASS_RANGE = (0, 10)

# =============================================================================
# POST-PROCESSING THRESHOLDS
# =============================================================================

# Anchors whose best class score is not strictly above this are discarded
SCORE_THRESHOLD = 0.5

# Same-class boxes overlapping an accepted box by more than this are suppressed
IOU_THRESHOLD = 0.45

# =============================================================================
# PREPROCESSING
# =============================================================================

# Gray value used to fill letterbox padding (matches a light gray canvas)
LETTERBOX_PAD_VALUE = 204

# Smallest/largest accepted model input size
MIN_INPUT_SIZE = 32
MAX_INPUT_SIZE = 4096

# =============================================================================
# MODEL CATALOG
# =============================================================================

MODELS_DIR = Path(__file__).parent / "models"

# Manifest describing the models in MODELS_DIR
MODEL_MANIFEST_NAME = "models.json"

# File suffixes treated as loadable models
MODEL_SUFFIXES = (".onnx",)

DEFAULT_MODEL_VERSION = "1.0"

# =============================================================================
# OVERLAY DRAWING
# =============================================================================

OVERLAY_BOX_COLOR = (0, 255, 0)  # RGB
OVERLAY_BOX_THICKNESS = 2
OVERLAY_TEXT_SCALE = 0.6
OVERLAY_TEXT_THICKNESS = 1
OVERLAY_LABEL_BACKGROUND = (0, 0, 0)
OVERLAY_LABEL_ALPHA = 0.5

# Image suffixes picked up when reading a directory
IMAGE_SUFFIXES = (".jpg", ".jpeg", ".png", ".bmp", ".webp")
