"""
Learning engine - records generations, analyzes them and folds recurring
design choices of successful flyers into a confidence-weighted pattern library.
"""
import logging
import threading
import uuid
from collections import Counter
from datetime import datetime
from typing import Any, Callable, Optional, Union

import numpy as np
from pydantic import BaseModel

from ..config import LearningConfig, get_config
from ..errors import ANALYSIS_DEGRADED
from ..models.analysis import DesignPatterns, LearningInsight, Recommendation, RecordAnalysis
from ..models.learning import (
    PATTERN_CATEGORIES,
    GenerationRecord,
    LearnedPattern,
    LearningExport,
    LearningStatus,
    LearningTotals,
    PatternLibrarySnapshot,
    PerformanceMetrics,
    RecordSummary,
    StylePatterns,
)
from ..models.outcome import GenerationOutcome, GenerationWarning
from .analyzer import PatternAnalyzer


logger = logging.getLogger(__name__)


# Proven real-estate patterns the library starts from
SEED_PATTERNS = {
    "luxury-real-estate": {
        "color_schemes": [
            (["#1a1a1a", "#d4af37", "#ffffff"], 0.95),
            (["#2c1810", "#c5a572", "#f5f5f5"], 0.92),
            (["#1e3a8a", "#fbbf24", "#ffffff"], 0.89),
        ],
        "layouts": [
            ("golden-ratio", "generous", 0.94),
            ("asymmetric-grid", "balanced", 0.91),
            ("centered-hero", "minimal", 0.88),
        ],
        "typography": [
            ("serif", "sans-serif", "strong", 0.93),
            ("display", "serif", "elegant", 0.90),
        ],
    },
    "modern-contemporary": {
        "color_schemes": [
            (["#1e40af", "#3b82f6", "#0f172a"], 0.94),
            (["#059669", "#10b981", "#064e3b"], 0.91),
            (["#7c3aed", "#a855f7", "#1e1b4b"], 0.89),
        ],
        "layouts": [
            ("grid-modern", "consistent", 0.93),
            ("card-based", "moderate", 0.90),
            ("minimalist", "tight", 0.87),
        ],
        "typography": [
            ("sans-serif", "sans-serif", "clean", 0.92),
            ("geometric", "geometric", "modern", 0.89),
        ],
    },
    "classic-elegant": {
        "color_schemes": [
            (["#1f2937", "#6b7280", "#f9fafb"], 0.93),
            (["#374151", "#9ca3af", "#ffffff"], 0.90),
            (["#111827", "#4b5563", "#f3f4f6"], 0.88),
        ],
        "layouts": [
            ("symmetrical", "traditional", 0.92),
            ("column-based", "structured", 0.89),
            ("formal-grid", "balanced", 0.86),
        ],
        "typography": [
            ("serif", "serif", "formal", 0.91),
            ("classic", "classic", "traditional", 0.88),
        ],
    },
}


def seed_pattern_library(now: Optional[datetime] = None) -> dict[str, StylePatterns]:
    """Build a fresh library from the proven patterns."""
    now = now or datetime.now()
    library = {}

    for style_id, seeds in SEED_PATTERNS.items():
        colors = {}
        for scheme, confidence in seeds["color_schemes"]:
            for color in scheme:
                colors[color] = max(confidence, colors.get(color, 0.0))

        library[style_id] = {
            "colorUsage": [
                LearnedPattern(pattern=color, confidence=confidence, usage_count=0,
                               learned_at=now, source="seed")
                for color, confidence in colors.items()
            ],
            "layoutStructure": [
                LearnedPattern(pattern=layout, confidence=confidence, usage_count=0,
                               learned_at=now, source="seed", details={"spacing": spacing})
                for layout, spacing, confidence in seeds["layouts"]
            ],
            "typography": [
                LearnedPattern(pattern=f"{heading}/{body}", confidence=confidence, usage_count=0,
                               learned_at=now, source="seed", details={"hierarchy": hierarchy})
                for heading, body, hierarchy, confidence in seeds["typography"]
            ],
        }

    return library


class LearningEngine:
    """
    Append-only record store plus pattern library.

    One re-entrant lock guards records, totals and every library write;
    a learning cycle holds it for the whole merge. Public methods do not raise.
    """

    def __init__(
        self,
        analyzer: Optional[PatternAnalyzer] = None,
        config: Optional[LearningConfig] = None,
        on_checkpoint: Optional[Callable[[PatternLibrarySnapshot], None]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            analyzer: Pattern analyzer used for record analysis and cycles
            config: Learning thresholds (defaults to the global config)
            on_checkpoint: Called with a library snapshot after each completed cycle
            clock: Time source, for deterministic tests
        """
        self.analyzer = analyzer or PatternAnalyzer()
        self.config = config or get_config().learning
        self.on_checkpoint = on_checkpoint
        self._clock = clock or datetime.now

        self._lock = threading.RLock()
        self._records: dict[str, GenerationRecord] = {}
        self._incorporated: set[str] = set()
        self._totals = LearningTotals()
        self._patterns: dict[str, StylePatterns] = seed_pattern_library(self._clock())

        logger.info(f"Learning engine initialized with seeded styles: {list(self._patterns)}")

    # === Recording ===

    def record(
        self,
        request: Union[BaseModel, dict[str, Any], None],
        outcome: GenerationOutcome,
        metadata: Optional[dict[str, Any]] = None,
    ) -> str:
        """
        Append a generation record and update totals.
        Triggers a learning cycle once enough records exist.

        Args:
            request: Request as received (model or raw payload)
            outcome: Success with document, or failure with error
            metadata: style_id, generation_time_ms, rating and free-form extras

        Returns:
            The new record id
        """
        metadata = dict(metadata or {})
        style_id = metadata.pop("style_id", None)
        if style_id is None and outcome.document is not None:
            style_id = outcome.document.metadata.design_system_id

        record = GenerationRecord(
            id=f"flyer_{uuid.uuid4().hex[:12]}",
            timestamp=self._clock(),
            request_id=self._request_id(request),
            request=self._payload(request),
            style_id=style_id,
            outcome=outcome,
            metrics=self._metrics(outcome, metadata),
        )

        with self._lock:
            self._records[record.id] = record
            self._totals.generated += 1
            if record.success:
                self._totals.succeeded += 1
            else:
                self._totals.failed += 1
            cycle_due = len(self._records) >= self.config.min_samples_for_learning

            logger.info(
                f"Recorded generation {record.id} ({'SUCCESS' if record.success else 'FAILED'}), "
                f"success rate {self._totals.success_rate:.1%}"
            )

        # The checkpoint callback must run without the lock held
        if cycle_due:
            self.run_learning_cycle()

        return record.id

    def _request_id(self, request: Any) -> str:
        if isinstance(request, BaseModel):
            request_id = getattr(request, "request_id", None)
        elif isinstance(request, dict):
            request_id = request.get("request_id")
        else:
            request_id = None
        return str(request_id) if request_id else uuid.uuid4().hex[:12]

    def _payload(self, request: Any) -> dict[str, Any]:
        if isinstance(request, BaseModel):
            return request.model_dump(mode="json")
        if isinstance(request, dict):
            return dict(request)
        if request is None:
            return {}
        return {"raw": repr(request)}

    def _metrics(self, outcome: GenerationOutcome, metadata: dict[str, Any]) -> PerformanceMetrics:
        generation_time = metadata.pop("generation_time_ms", 0.0)
        rating = metadata.pop("rating", None)

        section_count = 0
        photo_count = 0
        if outcome.document is not None:
            section_count = len(outcome.document.section_names)
            photo_count = len(outcome.document.content.image_refs())

        try:
            generation_time = float(generation_time or 0.0)
        except (TypeError, ValueError):
            generation_time = 0.0
        try:
            rating = float(rating) if rating is not None else None
        except (TypeError, ValueError):
            rating = None

        return PerformanceMetrics(
            generation_time_ms=generation_time,
            section_count=section_count,
            photo_count=photo_count,
            rating=rating,
            extra=metadata,
        )

    # === Analysis ===

    def analyze(self, record_id: str) -> Optional[RecordAnalysis]:
        """
        Analyze a recorded generation.

        Failed records get an analysis with no patterns. A document that yields
        no usable signal is marked degraded and its outcome gets an
        AnalysisDegraded warning.

        Returns:
            RecordAnalysis, or None for an unknown record id
        """
        with self._lock:
            record = self._records.get(record_id)
            if record is None:
                logger.warning(f"Analysis requested for unknown record {record_id}")
                return None
            if record.analysis is not None:
                return record.analysis

        if not record.success:
            analysis = RecordAnalysis(record_id=record.id, style_id=record.style_id, success=False)
        else:
            patterns = self._safe_patterns(record)
            if patterns is None or not patterns.has_signal:
                analysis = RecordAnalysis(
                    record_id=record.id,
                    style_id=record.style_id,
                    success=True,
                    degraded=True,
                )
            else:
                analysis = RecordAnalysis(
                    record_id=record.id,
                    style_id=record.style_id,
                    success=True,
                    patterns=patterns,
                    recommendations=self._recommendations(patterns),
                    learning_insights=self._insights(patterns),
                )

        with self._lock:
            if record.analysis is None:
                record.analysis = analysis
                if analysis.degraded:
                    logger.warning(f"Analysis of {record.id} found no usable design signal")
                    record.outcome.warnings.append(GenerationWarning(
                        kind=ANALYSIS_DEGRADED,
                        message="Generated document yielded no usable design signal",
                        details={"record_id": record.id},
                    ))
            return record.analysis

    def _safe_patterns(self, record: GenerationRecord) -> Optional[DesignPatterns]:
        try:
            return self.analyzer.analyze(record.outcome.document)
        except Exception:
            logger.exception(f"Pattern analysis failed for {record.id}")
            return None

    def _recommendations(self, patterns: DesignPatterns) -> list[Recommendation]:
        recommendations = []

        if patterns.color_usage.harmony.score < self.config.harmony_threshold:
            recommendations.append(Recommendation(
                category="color",
                priority="high",
                suggestion="Improve color harmony by ensuring better contrast and balance",
                action="Adjust color palette to create more visual interest",
            ))

        if patterns.layout_structure.responsiveness.score < self.config.responsiveness_threshold:
            recommendations.append(Recommendation(
                category="layout",
                priority="medium",
                suggestion="Enhance responsive design for better mobile experience",
                action="Add more media queries and flexible units",
            ))

        if patterns.typography.hierarchy == "basic":
            recommendations.append(Recommendation(
                category="typography",
                priority="medium",
                suggestion="Strengthen typography hierarchy for better readability",
                action="Increase font size and weight variations",
            ))

        return recommendations

    def _insights(self, patterns: DesignPatterns) -> list[LearningInsight]:
        insights = []
        threshold = self.config.excellence_threshold

        harmony = patterns.color_usage.harmony.score
        if harmony > threshold:
            insights.append(LearningInsight(
                pattern="excellent-color-harmony",
                confidence=harmony,
                description="This flyer demonstrates excellent color harmony",
            ))

        responsiveness = patterns.layout_structure.responsiveness.score
        if responsiveness > threshold:
            insights.append(LearningInsight(
                pattern="excellent-responsiveness",
                confidence=responsiveness,
                description="This flyer shows excellent responsive design",
            ))

        return insights

    # === Learning cycle ===

    def run_learning_cycle(self) -> bool:
        """
        Fold fresh successful records into the pattern library.

        Looks at the most recent records, keeps successes that were not
        incorporated by an earlier cycle and learns from them when there
        are enough. A record is incorporated at most once. The checkpoint
        callback runs after the lock is released.

        Returns:
            True when a cycle ran and updated the library
        """
        snapshot = None
        with self._lock:
            recent = list(self._records.values())[-self.config.recent_window:]
            fresh = [r for r in recent if r.success and r.id not in self._incorporated]

            if len(fresh) < self.config.min_successful_records:
                logger.debug(f"Skipping learning cycle: {len(fresh)} fresh successful records")
                return False

            logger.info(f"Learning from {len(fresh)} successful flyers")
            for style_id, records in self._group_by_style(fresh).items():
                try:
                    common = self._common_patterns(records)
                except Exception:
                    logger.exception(f"Could not extract patterns for style {style_id}")
                    continue
                self._merge(style_id, common, len(records))

            self._incorporated.update(r.id for r in fresh)
            self._totals.learning_cycles += 1
            logger.info(f"Learning cycle completed. Total cycles: {self._totals.learning_cycles}")

            if self.on_checkpoint is not None:
                snapshot = self.export_pattern_library()

        if snapshot is not None:
            try:
                self.on_checkpoint(snapshot)
            except Exception:
                logger.exception("Pattern library checkpoint callback failed")

        return True

    def _group_by_style(self, records: list[GenerationRecord]) -> dict[str, list[GenerationRecord]]:
        groups = {}
        for record in records:
            if record.style_id is None:
                continue
            groups.setdefault(record.style_id, []).append(record)
        return groups

    def _record_patterns(self, record: GenerationRecord) -> Optional[DesignPatterns]:
        if record.analysis is not None and record.analysis.patterns is not None:
            return record.analysis.patterns
        if record.analysis is not None and record.analysis.degraded:
            return None
        return self._safe_patterns(record)

    def _common_patterns(self, records: list[GenerationRecord]) -> dict[str, list[str]]:
        """
        Common colors (seen in more than one record), layouts ranked by
        frequency and the most used font families.
        """
        color_counts = Counter()
        layout_counts = Counter()
        font_counts = Counter()

        for record in records:
            patterns = self._record_patterns(record)
            if patterns is None or not patterns.has_signal:
                continue
            color_counts.update(dict.fromkeys(patterns.color_usage.distinct_colors, 1))
            layout_counts[patterns.layout_structure.grid_system] += 1
            font_counts.update(patterns.typography.font_families)

        colors = [color for color, count in color_counts.most_common() if count > 1]
        return {
            "colorUsage": colors[:self.config.top_colors],
            "layoutStructure": [layout for layout, _ in layout_counts.most_common()],
            "typography": [font for font, _ in font_counts.most_common(self.config.top_fonts)],
        }

    def _merge(self, style_id: str, common: dict[str, list[str]], record_count: int) -> None:
        """New values start at the initial confidence; repeats gain usage and confidence."""
        now = self._clock()
        style_patterns = self._patterns.setdefault(style_id, {c: [] for c in PATTERN_CATEGORIES})

        for category, values in common.items():
            entries = style_patterns.setdefault(category, [])
            for value in values:
                existing = next((p for p in entries if p.pattern == value), None)
                if existing is None:
                    entries.append(LearnedPattern(
                        pattern=value,
                        confidence=self.config.initial_confidence,
                        usage_count=1,
                        learned_at=now,
                        details={"records": record_count},
                    ))
                else:
                    existing.usage_count += 1
                    existing.confidence = round(
                        min(self.config.max_confidence, existing.confidence + self.config.confidence_step),
                        4,
                    )

        logger.info(f"Updated patterns for style: {style_id}")

    # === Introspection ===

    def get_record(self, record_id: str) -> Optional[GenerationRecord]:
        with self._lock:
            return self._records.get(record_id)

    def get_patterns(self, style_id: str) -> StylePatterns:
        """Copy of the learned patterns for one style (empty when unknown)."""
        with self._lock:
            patterns = self._patterns.get(style_id, {})
            return {
                category: [p.model_copy(deep=True) for p in entries]
                for category, entries in patterns.items()
            }

    def get_status(self) -> LearningStatus:
        with self._lock:
            times = [r.metrics.generation_time_ms for r in self._records.values()]
            average = p95 = None
            if times:
                values = np.array(times, dtype=float)
                average = float(np.mean(values))
                p95 = float(np.percentile(values, 95))

            return LearningStatus(
                totals=self._totals.model_copy(),
                success_rate=self._totals.success_rate,
                pattern_count=sum(
                    len(entries)
                    for patterns in self._patterns.values()
                    for entries in patterns.values()
                ),
                style_count=len(self._patterns),
                record_count=len(self._records),
                incorporated_count=len(self._incorporated),
                average_generation_time_ms=average,
                p95_generation_time_ms=p95,
            )

    def export_pattern_library(self) -> PatternLibrarySnapshot:
        with self._lock:
            return PatternLibrarySnapshot(
                exported_at=self._clock(),
                patterns={style_id: self.get_patterns(style_id) for style_id in self._patterns},
                incorporated_record_ids=sorted(self._incorporated),
                totals=self._totals.model_copy(),
            )

    def load_pattern_library(self, snapshot: Union[PatternLibrarySnapshot, dict[str, Any]]) -> bool:
        """
        Replace the pattern library from a snapshot.
        Records and totals are left as they are.

        Returns:
            False when the snapshot could not be read
        """
        try:
            if not isinstance(snapshot, PatternLibrarySnapshot):
                snapshot = PatternLibrarySnapshot.model_validate(snapshot)
        except Exception:
            logger.exception("Invalid pattern library snapshot")
            return False

        restored = snapshot.model_copy(deep=True)
        with self._lock:
            self._patterns = restored.patterns
            self._incorporated = set(restored.incorporated_record_ids)
        logger.info(f"Pattern library restored for styles: {list(restored.patterns)}")
        return True

    def export_learning_data(self, limit: int = 20) -> LearningExport:
        """Status, patterns and the most recent record summaries."""
        with self._lock:
            recent = list(self._records.values())[-limit:] if limit > 0 else []
            return LearningExport(
                exported_at=self._clock(),
                status=self.get_status(),
                patterns={style_id: self.get_patterns(style_id) for style_id in self._patterns},
                recent_records=[
                    RecordSummary(
                        id=r.id,
                        style_id=r.style_id,
                        success=r.success,
                        timestamp=r.timestamp,
                        incorporated=r.id in self._incorporated,
                    )
                    for r in reversed(recent)
                ],
            )
