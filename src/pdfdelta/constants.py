#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdfdelta/constants.py
"""Constants shared across the pdfdelta comparison pipeline.

Size thresholds are expressed in combined character count of both documents'
extracted text and are intentionally not user-configurable.
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Diff granularity thresholds
# =============================================================================

WORD_THRESHOLD = 200_000
PARAGRAPH_THRESHOLD = 900_000
ABSOLUTE_LIMIT = 2_600_000

SENTENCE_MODE_NOTE = (
    "Large documents are compared at sentence level for faster results. Highlights may be less granular."
)
PARAGRAPH_MODE_NOTE = "Medium documents are compared at paragraph level to balance speed and detail."

# =============================================================================
# Extraction
# =============================================================================

# Text runs are joined with this separator to build Extraction.full_text
TOKEN_SEPARATOR = " "

# Viewport scale used when computing normalized token geometry
REFERENCE_SCALE = 1.0

RunGranularity = Literal["span", "word"]
DEFAULT_RUN_GRANULARITY: RunGranularity = "span"

NO_TEXT_FOUND_MESSAGE = "No searchable text found. The PDF may be scanned, encrypted, or corrupted."
INVALID_PAGE_REQUEST = "Invalid page request"
INVALID_PAGE_REQUEST_GUIDANCE = (
    "Unable to read at least one page of the PDF. Please ensure the file is not corrupted or password protected."
)
GENERIC_COMPARE_FAILURE = "Unable to compare the PDF files."

# =============================================================================
# Job execution
# =============================================================================

WorkerMode = Literal["process", "thread"]
DEFAULT_WORKER_MODE: WorkerMode = "process"
DEFAULT_EXTRACTION_WORKERS = 2
WORKER_FAULT_MESSAGE = "Unable to complete comparison in background worker."
DIFF_FAILURE_MESSAGE = "Unable to compute differences."

# =============================================================================
# Preview rendering
# =============================================================================

MIN_BASE_SCALE = 0.6
MAX_BASE_SCALE = 1.2
MAX_ZOOMED_SCALE = 3.0
DEFAULT_ZOOM = 1.0
DEFAULT_HIGHLIGHT_OPACITY = 0.35
ADDED_HIGHLIGHT_RGB = (60 / 255.0, 170 / 255.0, 60 / 255.0)
REMOVED_HIGHLIGHT_RGB = (1.0, 80 / 255.0, 80 / 255.0)

# =============================================================================
# Dependencies
# =============================================================================

PDF_MIN_PYMUPDF_VERSION = "1.26.4"
DEPS_PDF = [("pymupdf", "fitz", f">={PDF_MIN_PYMUPDF_VERSION}")]

# =============================================================================
# Configuration
# =============================================================================

CONFIG_ENV_VAR = "PDFDELTA_CONFIG"
CONFIG_FILENAMES = [".pdfdelta.toml", ".pdfdelta.yaml", ".pdfdelta.yml", ".pdfdelta.json", "pyproject.toml"]
