import logging
import os

# Time domain shown by the demo
WINDOW_LENGTH = 4.0                                                            # seconds
CURVE_STEP = 0.02                                                              # spacing of the continuous / reconstructed curves

# Animation clock
CLOCK_INCREMENT = 0.02                                                         # seconds added to the cursor on each tick
TICK_INTERVAL = 0.02                                                           # seconds between two ticks of the page

# Widget bounds
SIGNAL_FREQ_MIN = 0.2
SIGNAL_FREQ_MAX = 10.0
SIGNAL_FREQ_STEP = 0.1
SIGNAL_FREQ_DEFAULT = 1.0

SAMPLING_FREQ_MIN = 1.0
SAMPLING_FREQ_MAX = 20.0
SAMPLING_FREQ_STEP = 0.5
SAMPLING_FREQ_DEFAULT = 8.0

# Crests of a unit sine have prominence 2, sinc ripples stay well under this
PEAK_PROMINENCE = 0.5


def parse_log_level(name, default=logging.INFO):
    """Numeric level for a name such as "DEBUG", default for anything logging does not know."""
    level = logging.getLevelName(str(name).strip().upper())
    if isinstance(level, int):
        return level
    return default


LOG_LEVEL = parse_log_level(os.environ.get("NYQUIST_LOG_LEVEL", "INFO"))
