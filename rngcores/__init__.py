"""HC-128, ISAAC and ISAAC-64 generators, block buffering and a timing-jitter entropy collector."""

__version__ = "0.1.0"