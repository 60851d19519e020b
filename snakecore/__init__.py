"""Engine core utilities for a real-time renderer and a shader permutation compiler."""

__version__ = "0.1.0"