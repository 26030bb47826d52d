"""
Pipeline orchestrator - validate, adapt, assemble, record and analyze one flyer.
"""
import logging
import time
from datetime import datetime
from typing import Any, Callable, Optional, Union

from ..config import Config, get_config
from ..errors import GenerationError
from ..models.design import DesignSystem
from ..models.learning import LearningExport, LearningStatus, PatternLibrarySnapshot
from ..models.market import MarketAdaptations
from ..models.outcome import (
    GenerationErrorInfo,
    GenerationOutcome,
    GenerationResult,
    GenerationWarning,
)
from ..models.request import GenerationRequest

from .assembler import DocumentAssembler, coerce_request
from .catalog import StyleCatalog
from .learning import LearningEngine
from .listing_parser import merge_listing, parse_listing_text
from .market import MarketIntelligenceEngine


logger = logging.getLogger(__name__)


class FlyerOrchestrator:
    """
    Entry point for flyer generation.
    Holds one learning engine; every call is recorded there, success or not.
    """

    def __init__(
        self,
        catalog: Optional[StyleCatalog] = None,
        market: Optional[MarketIntelligenceEngine] = None,
        assembler: Optional[DocumentAssembler] = None,
        learning: Optional[LearningEngine] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.catalog = catalog or StyleCatalog()
        self.market = market or MarketIntelligenceEngine()
        self.assembler = assembler or DocumentAssembler()
        self.learning = learning or LearningEngine()
        self._clock = clock or datetime.now

    def generate_flyer_document(
        self,
        request: Union[GenerationRequest, dict[str, Any]],
    ) -> GenerationResult:
        """
        Generate a flyer document.

        Pipeline steps:
        1. Validate the request and fill missing fields from listing text
        2. Compute market adaptations
        3. Pick the design system (explicit, or auto-selected from market hints)
        4. Assemble the document
        5. Record the outcome and analyze it

        Args:
            request: GenerationRequest or an equivalent dict

        Returns:
            GenerationResult; failures are returned, never raised
        """
        started = time.perf_counter()
        now = self._clock()
        warnings = []
        style_id = None
        adaptations = None
        payload: Any = request

        try:
            generation_request = coerce_request(request)
            payload = generation_request
            logger.info(f"Generating {generation_request.kind} flyer {generation_request.request_id}")

            generation_request = self._apply_listing_text(generation_request)
            payload = generation_request

            adaptations = self.market.adaptations(generation_request.property_listing, now)

            design_system, explicit_style = self._select_style(generation_request, adaptations, warnings)
            style_id = design_system.id

            document = self.assembler.assemble(
                generation_request,
                design_system,
                adaptations,
                generated_at=now,
                explicit_style=explicit_style,
            )
            outcome = GenerationOutcome.ok(document, warnings)

        except GenerationError as e:
            logger.warning(f"Flyer generation rejected: {e.message}")
            outcome = GenerationOutcome.failed(
                GenerationErrorInfo(kind=e.kind, message=e.message, details=e.details),
                warnings,
            )
        except Exception as e:
            logger.exception("Unexpected error during flyer generation")
            outcome = GenerationOutcome.failed(
                GenerationErrorInfo(message=f"Unexpected error: {e}", details={"type": type(e).__name__}),
                warnings,
            )

        elapsed_ms = (time.perf_counter() - started) * 1000
        record_id = self.learning.record(
            payload,
            outcome,
            {"style_id": style_id, "generation_time_ms": elapsed_ms},
        )
        analysis = self.learning.analyze(record_id)

        if outcome.success:
            logger.info(f"Flyer {record_id} generated with {style_id} in {elapsed_ms:.1f}ms")

        return GenerationResult(
            success=outcome.success,
            document=outcome.document,
            error=outcome.error,
            warnings=list(outcome.warnings),
            record_id=record_id,
            analysis=analysis,
            market=adaptations,
        )

    def _apply_listing_text(self, request: GenerationRequest) -> GenerationRequest:
        if not request.listing_text:
            return request
        listing = merge_listing(request.property_listing, parse_listing_text(request.listing_text))
        if listing is request.property_listing:
            return request
        return request.model_copy(update={"property_listing": listing})

    def _select_style(
        self,
        request: GenerationRequest,
        adaptations: MarketAdaptations,
        warnings: list[GenerationWarning],
    ) -> tuple[DesignSystem, bool]:
        """
        Resolve the design system and whether the caller chose it.
        Auto-selected and fallback styles may take the seasonal accent; a named style keeps its palette.
        """
        if request.style is None:
            style_id = self.catalog.style_for_keyword(
                adaptations.property.style,
                adaptations.snapshot.price_range_segment,
            )
            logger.info(f"Auto-selected style {style_id} from market hints")
            return self.catalog.resolve(style_id), False

        resolution = self.catalog.resolve_outcome(request.style)
        if resolution.warning is not None:
            warnings.append(resolution.warning)
        return resolution.design_system, not resolution.fallback_used

    def get_learning_status(self) -> LearningStatus:
        return self.learning.get_status()

    def export_pattern_library(self) -> PatternLibrarySnapshot:
        return self.learning.export_pattern_library()

    def export_learning_data(self, limit: int = 20) -> LearningExport:
        return self.learning.export_learning_data(limit)


def create_orchestrator(
    config: Optional[Config] = None,
    on_checkpoint: Optional[Callable[[PatternLibrarySnapshot], None]] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> FlyerOrchestrator:
    """
    Wire an orchestrator with its own learning engine.

    Args:
        config: Configuration (defaults to the global config)
        on_checkpoint: Receives a pattern library snapshot after each learning cycle
        clock: Time source for season detection and record timestamps
    """
    config = config or get_config()
    return FlyerOrchestrator(
        catalog=StyleCatalog(default_style_id=config.catalog.default_style_id),
        market=MarketIntelligenceEngine(),
        assembler=DocumentAssembler(
            max_features=config.assembler.max_features,
            accent_override_confidence=config.assembler.accent_override_confidence,
        ),
        learning=LearningEngine(config=config.learning, on_checkpoint=on_checkpoint, clock=clock),
        clock=clock,
    )
