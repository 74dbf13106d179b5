# config.py
"""
UI Configuration and Constants

Centralized configuration for the WireLab dashboard.
All magic numbers and configuration values should be defined here.

Sections
--------
- Window Configuration: Main window dimensions and title
- Refresh Rates: Timer periods of the timed simulations
- Simulation Steps: dt passed to each engine advance() call
- Parameter Ranges: Widget limits (the engine re-validates)
- UI Colors: Color scheme for charts and UI elements

Usage
-----
>>> from wirelab.ui.config import OCCUPANCY_REFRESH_MS, CHANNEL_RANGE
"""

# =============================================================================
# WINDOW CONFIGURATION
# =============================================================================
WINDOW_TITLE = "WireLab - Wireless Communications Lab"
X_OFFSET = 50
Y_OFFSET = 50
WINDOW_WIDTH = 1400
WINDOW_HEIGHT = 900

# =============================================================================
# REFRESH RATES (milliseconds)
# =============================================================================
OCCUPANCY_REFRESH_MS = 200      # Trunking simulator tick
HANDOFF_REFRESH_MS = 100        # Handoff drive tick
FRAME_REFRESH_MS = 50           # Doppler / multipath animation frame
MODULATION_REFRESH_MS = 50

# =============================================================================
# SIMULATION STEPS
# =============================================================================
OCCUPANCY_DT = 0.1              # Time units per occupancy tick
HANDOFF_DT = 1.0                # Seconds of driving per handoff tick
FRAME_DT = FRAME_REFRESH_MS / 1000.0
MODULATION_TIME_STEP = 0.02

# =============================================================================
# PARAMETER RANGES (min, max, step)
# =============================================================================
CHANNEL_RANGE = (1, 50, 1)
ARRIVAL_RATE_RANGE = (0.1, 20.0, 0.1)
SERVICE_RATE_RANGE = (0.1, 5.0, 0.1)
SPEED_RANGE_KMH = (5.0, 150.0, 5.0)
CARRIER_RANGE_GHZ = (1.0, 5.0, 0.1)
HYSTERESIS_RANGE_DB = (0.0, 20.0, 0.5)
THRESHOLD_RANGE_DB = (0.0, 30.0, 0.5)
NOISE_VARIANCE_RANGE = (0.0, 2.0, 0.05)
SAMPLES_PER_SYMBOL_RANGE = (2, 40, 1)
REUSE_SHIFT_RANGE = (0, 4, 1)
MODULATION_INDEX_RANGE = (0.1, 1.0, 0.05)
BANDWIDTH_RANGE_KHZ = (1.0, 10.0, 0.5)

# =============================================================================
# UI COLORS
# =============================================================================
APP_BACKGROUND_COLOR = "#1E1E2E"
PANEL_COLOR = "#252526"
ACCENT_COLOR = "#00E5FF"

THEORY_COLOR = "#6A82FB"
SIMULATION_COLOR = "#FF6F91"
BS1_COLOR = "#00E5FF"
BS2_COLOR = "#F9C74F"
HANDOFF_COLOR = "#2ECC71"
DROP_COLOR = "#E74C3C"
LOS_COLOR = "#10B981"
NLOS_COLOR = "#F43F5E"
APPROACH_COLOR = "#3B82F6"
RECEDE_COLOR = "#EF4444"
NEUTRAL_COLOR = "#22C55E"

CLUSTER_COLORS = [
    "#ef4444", "#3b82f6", "#10b981", "#f59e0b", "#8b5cf6",
    "#ec4899", "#06b6d4", "#f97316", "#14b8a6", "#6366f1",
    "#84cc16", "#a855f7", "#0ea5e9", "#f43f5e", "#22c55e",
]
