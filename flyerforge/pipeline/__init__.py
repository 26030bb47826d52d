"""Pipeline modules for flyer generation and learning."""

from .catalog import StyleCatalog
from .market import MarketIntelligenceEngine
from .listing_parser import ListingTextParser, parse_listing_text
from .assembler import DocumentAssembler
from .analyzer import PatternAnalyzer, declarations_from_css
from .learning import LearningEngine
from .orchestrator import FlyerOrchestrator, create_orchestrator

__all__ = [
    "StyleCatalog",
    "MarketIntelligenceEngine",
    "ListingTextParser",
    "parse_listing_text",
    "DocumentAssembler",
    "PatternAnalyzer",
    "declarations_from_css",
    "LearningEngine",
    "FlyerOrchestrator",
    "create_orchestrator",
]
