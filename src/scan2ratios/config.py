import os


INPUT_DIR = os.environ.get("SCAN2RATIOS_INPUT_DIR", "input")
OUTPUT_DIR = os.environ.get("SCAN2RATIOS_OUTPUT_DIR", "output")
LABEL_DICTIONARY_PATH = os.environ.get(
    "SCAN2RATIOS_LABELS", os.path.join("config", "labels.json")
)

# Working unit for every extracted or computed monetary figure (1 crore).
CANONICAL_UNIT = 10_000_000
UNIT_MULTIPLIERS = {
    "cr": 10_000_000,
    "crore": 10_000_000,
    "crores": 10_000_000,
    "lakh": 100_000,
    "lakhs": 100_000,
    "million": 1_000_000,
    "billion": 1_000_000_000,
    "thousand": 1_000,
    "k": 1_000,
    "m": 1_000_000,
    "b": 1_000_000_000,
}

LOOKAHEAD_LINES = 3

CONFIDENCE_BASE = 0.5
CONFIDENCE_KEYWORD_BONUS = 0.3
CONFIDENCE_RANGE_BONUS = 0.2
CONFIDENCE_RANGE_MAX = 1_000_000
CONFIDENCE_OUTLIER_PENALTY = 0.2
CONFIDENCE_OUTLIER_MIN = 0.01
CONFIDENCE_OUTLIER_MAX = 10_000_000
CONFIDENCE_HIGH = 0.8
CONFIDENCE_MEDIUM = 0.6

OCR_LANG = os.environ.get("SCAN2RATIOS_OCR_LANG", "eng")
OCR_CONFIG = "--psm 6"
OCR_DPI = 300
THRESHOLD_TEXT_LEN_FOR_OCR = 40
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp")
PDF_EXTENSIONS = (".pdf",)
TEXT_EXTENSIONS = (".txt",)
