"""ethwatch - forwards /sys/class/net interface statistics to DogStatsD."""

__version__ = "0.1.0"
