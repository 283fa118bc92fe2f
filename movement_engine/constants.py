"""
Engine constants - all magic numbers in one place.
Tables keyed by zone type or item category live beside the code that reads them.
"""

# =============================================================================
# INSPECTION
# =============================================================================
INSPECTION_PASS_PROBABILITY = 0.85
INSPECTION_DURATION = 30.0        # simulated seconds per item

# =============================================================================
# FAILURES AND RECYCLING
# =============================================================================
BASE_FAILURE_RATE_PER_HOUR = 0.001
REMOVAL_DELAY = 5.0               # simulated seconds before a recycled item leaves
SECONDS_PER_HOUR = 3600.0

# Severity thresholds on a uniform draw: < 0.4 low, < 0.7 medium, < 0.9 high, else critical
SEVERITY_THRESHOLDS = (0.4, 0.7, 0.9)

# =============================================================================
# MOVEMENT
# =============================================================================
DEFAULT_TRANSITION_TIME = 60.0    # seconds, for edges without a tabulated time

# =============================================================================
# ZONE LAYOUT (slot grid inside a zone)
# =============================================================================
SLOT_WIDTH = 30
SLOT_HEIGHT = 20
SLOT_MARGIN = 5

# =============================================================================
# DEFAULT FACILITY
# =============================================================================
DOCK_COUNT = 2
DOCK_CAPACITY = 20
INSPECTION_STATION_COUNT = 1
INSPECTION_CAPACITY = 5
STORAGE_BIN_COUNT = 4
STORAGE_CAPACITY = 50
RACK_SLOT_COUNT = 12
RACK_SLOT_CAPACITY = 1
RECYCLE_SINK_COUNT = 1
RECYCLE_CAPACITY = 100

# =============================================================================
# TICK CADENCE (in ticks, at 60 ticks per simulated second)
# =============================================================================
TICKS_PER_SECOND = 60
DRAIN_EVERY_TICKS = 120
RESOLVE_EVERY_TICKS = 60
SCAN_EVERY_TICKS = 600
RECYCLE_EVERY_TICKS = 60
FRAME_BUDGET_MS = 10.0
