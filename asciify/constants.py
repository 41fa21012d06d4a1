"""
Image to ASCII Art Converter - Constants
========================================
Character ramp, control ranges and user-facing messages shared by the
converter, the session and the command line.
"""

from typing import Tuple


# =============================================================================
# CHARACTER RAMP
# =============================================================================

# Darkest/densest first, lightest last
ASCII_CHARS: Tuple[str, ...] = (
    '@', '&', '#', '%', '/', '*', '(', ')', '=', '+', '-', ':', ',', '.', ' '
)

BLANK_CHAR = ' '


# =============================================================================
# DIMENSIONS
# =============================================================================

DEFAULT_WIDTH = 80
DEFAULT_HEIGHT = 0                # 0 means "derive from the aspect ratio"

WIDTH_RANGE: Tuple[int, int] = (20, 200)
HEIGHT_RANGE: Tuple[int, int] = (10, 200)


# =============================================================================
# COLOR CODES
# =============================================================================

COLOR_TOKEN_PREFIX = '$x'
LINE_BREAK_HTML = '<br>'


# =============================================================================
# MESSAGES
# =============================================================================

LOAD_ERROR_MESSAGE = 'Error loading image. Please try a different image.'
PROCESS_ERROR_MESSAGE = (
    'Error processing image. Please try a different image or adjust the dimensions.'
)

DEFAULT_FETCH_TIMEOUT = 10.0
