"""causelink - in-process causal graph reasoning engine."""

__version__ = "0.1.0"
