"""tilecollapse - a small Wave Function Collapse tile synthesizer."""

__version__ = "0.1.0"
