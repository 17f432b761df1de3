"""LeanSim: unit economics, health tiers and recommendations for a Lean Canvas."""

__version__ = "0.1.0"
