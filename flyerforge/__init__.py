"""
flyerforge - adaptive real-estate flyer generation.

Assembles structured flyer documents from listing data and a design system,
biases design choices with seasonal and market heuristics, and learns
recurring patterns from successful generations.
"""

from .pipeline.orchestrator import FlyerOrchestrator, create_orchestrator

__version__ = "2.0.0"

__all__ = [
    "FlyerOrchestrator",
    "create_orchestrator",
]
