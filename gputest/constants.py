"""Constants shared by the sample generators, buffer factory and comparisons.

Values the settings layer reads are defaults; GPUTEST_* variables override
them (see ``gputest.config``).
"""

# =============================================================================
# Random Source
# =============================================================================

# Seed used when no seed is configured, so repeated runs reproduce inputs
DEFAULT_SEED = 0x12345678

# Default value range for random_mat (8-bit image range)
DEFAULT_MIN_VALUE = 0.0
DEFAULT_MAX_VALUE = 255.0

# =============================================================================
# Region of Interest
# =============================================================================

# Extra columns/rows added around a ROI view's backing buffer
ROI_MARGIN_MIN = 5
ROI_MARGIN_MAX = 15

# =============================================================================
# Test Sizes
# =============================================================================

# A power-of-two size and an odd size that breaks naive vectorization
DIFFERENT_SIZE_VALUES = [(128, 128), (113, 113)]

# =============================================================================
# Keypoint Tolerances
# =============================================================================

# Two keypoints correspond when all attribute differences stay below these
KEYPOINT_MAX_POINT_DIFF = 1.0
KEYPOINT_MAX_SIZE_DIFF = 1.0
KEYPOINT_MAX_ANGLE_DIFF = 2.0
KEYPOINT_MAX_RESPONSE_DIFF = 0.1

# Number of unmatched keypoints listed in a failure message
KEYPOINT_REPORT_LIMIT = 10

# =============================================================================
# Min/Max Oracle
# =============================================================================

# Initial extremes reported when no element takes part in the scan
DBL_MAX = 1.7976931348623157e308

__all__ = [
    "DEFAULT_SEED",
    "DEFAULT_MIN_VALUE",
    "DEFAULT_MAX_VALUE",
    "ROI_MARGIN_MIN",
    "ROI_MARGIN_MAX",
    "DIFFERENT_SIZE_VALUES",
    "KEYPOINT_MAX_POINT_DIFF",
    "KEYPOINT_MAX_SIZE_DIFF",
    "KEYPOINT_MAX_ANGLE_DIFF",
    "KEYPOINT_MAX_RESPONSE_DIFF",
    "KEYPOINT_REPORT_LIMIT",
    "DBL_MAX",
]
