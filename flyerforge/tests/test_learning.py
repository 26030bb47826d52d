"""
Tests for the learning engine.
Cycles must be idempotent over already-incorporated records and
pattern confidence must never decrease or exceed 0.95.
"""
import threading
from datetime import date

import pytest

from flyerforge.config import LearningConfig
from flyerforge.errors import ANALYSIS_DEGRADED
from flyerforge.models.document import StyleDeclarations
from flyerforge.models.learning import PatternLibrarySnapshot
from flyerforge.models.outcome import GenerationErrorInfo, GenerationOutcome
from flyerforge.models.request import GenerationRequest, PropertyListing
from flyerforge.pipeline.assembler import DocumentAssembler
from flyerforge.pipeline.catalog import StyleCatalog
from flyerforge.pipeline.learning import LearningEngine
from flyerforge.pipeline.market import MarketIntelligenceEngine


FALL = date(2024, 10, 15)


def make_outcome(style_id: str) -> GenerationOutcome:
    """Successful outcome with a real document for a style."""
    catalog = StyleCatalog(default_style_id="modern-contemporary")
    adaptations = MarketIntelligenceEngine().adaptations(PropertyListing(), FALL)
    document = DocumentAssembler().assemble(GenerationRequest(), catalog.resolve(style_id), adaptations)
    return GenerationOutcome.ok(document)


def failed_outcome() -> GenerationOutcome:
    return GenerationOutcome.failed(GenerationErrorInfo(kind="ValidationError", message="bad input"))


def pattern(engine: LearningEngine, style_id: str, category: str, value: str):
    return next((p for p in engine.get_patterns(style_id).get(category, []) if p.pattern == value), None)


class TestRecording:
    """Tests for record and analyze."""

    @pytest.fixture
    def engine(self) -> LearningEngine:
        return LearningEngine(config=LearningConfig(min_samples_for_learning=100))

    def test_record_updates_totals(self, engine):
        """Test that totals count successes and failures."""
        engine.record(GenerationRequest(), make_outcome("classic-elegant"))
        engine.record({"property_listing": "oops"}, failed_outcome())

        status = engine.get_status()
        assert status.totals.generated == 2
        assert status.totals.succeeded == 1
        assert status.totals.failed == 1
        assert status.record_count == 2
        assert status.success_rate == 0.5

    def test_record_resolves_style(self, engine):
        """Test that the style id is taken from the document when not given."""
        record_id = engine.record(GenerationRequest(), make_outcome("classic-elegant"))

        assert engine.get_record(record_id).style_id == "classic-elegant"

    def test_record_metrics(self, engine):
        """Test that performance metadata lands in the record metrics."""
        record_id = engine.record(
            GenerationRequest(),
            make_outcome("classic-elegant"),
            {"generation_time_ms": 12.5, "rating": 4, "channel": "email"},
        )
        metrics = engine.get_record(record_id).metrics

        assert metrics.generation_time_ms == 12.5
        assert metrics.rating == 4.0
        assert metrics.section_count == 6
        assert metrics.extra == {"channel": "email"}
        assert engine.get_status().average_generation_time_ms == 12.5

    def test_analyze_unknown_record(self, engine):
        """Test that unknown ids give None."""
        assert engine.analyze("flyer_missing") is None

    def test_analyze_failed_record(self, engine):
        """Test that failed records get an analysis without patterns."""
        record_id = engine.record(GenerationRequest(), failed_outcome())
        analysis = engine.analyze(record_id)

        assert analysis.success is False
        assert analysis.patterns is None
        assert analysis.recommendations == []

    def test_analyze_successful_record(self, engine):
        """Test insights for a well-formed luxury flyer."""
        record_id = engine.record(GenerationRequest(), make_outcome("luxury-real-estate"))
        analysis = engine.analyze(record_id)

        assert analysis.success is True
        assert analysis.degraded is False
        assert analysis.patterns.layout_structure.grid_system == "css-grid"
        assert "excellent-color-harmony" in [i.pattern for i in analysis.learning_insights]
        assert engine.get_record(record_id).analysis == analysis

    def test_modern_layout_is_excellent(self, engine):
        """Test that the mobile-first layout yields a responsiveness insight."""
        record_id = engine.record(GenerationRequest(), make_outcome("modern-contemporary"))
        analysis = engine.analyze(record_id)

        assert "excellent-responsiveness" in [i.pattern for i in analysis.learning_insights]
        assert analysis.recommendations == []

    def test_degraded_analysis(self, engine):
        """Test that a document with no style signal is marked degraded."""
        outcome = make_outcome("classic-elegant")
        bare = outcome.document.model_copy(update={"style": StyleDeclarations()})
        record_id = engine.record(GenerationRequest(), GenerationOutcome.ok(bare))

        analysis = engine.analyze(record_id)

        assert analysis.degraded is True
        assert analysis.patterns is None
        kinds = [w.kind for w in engine.get_record(record_id).outcome.warnings]
        assert kinds == [ANALYSIS_DEGRADED]

    def test_analyze_twice_keeps_one_warning(self, engine):
        """Test that repeated analysis does not duplicate warnings."""
        outcome = make_outcome("classic-elegant")
        bare = outcome.document.model_copy(update={"style": StyleDeclarations()})
        record_id = engine.record(GenerationRequest(), GenerationOutcome.ok(bare))

        engine.analyze(record_id)
        engine.analyze(record_id)

        assert len(engine.get_record(record_id).outcome.warnings) == 1


class TestLearningCycle:
    """Tests for learning cycles."""

    @pytest.fixture
    def engine(self) -> LearningEngine:
        """Engine that only learns on explicit cycles."""
        return LearningEngine(config=LearningConfig(min_samples_for_learning=100))

    def test_seeded_library(self, engine):
        """Test that proven patterns are present from the start."""
        seeded = pattern(engine, "luxury-real-estate", "colorUsage", "#d4af37")

        assert seeded is not None
        assert seeded.source == "seed"
        assert engine.get_status().totals.learning_cycles == 0

    def test_needs_three_successes(self, engine):
        """Test that fewer than three fresh successes do not learn."""
        engine.record(GenerationRequest(), make_outcome("classic-elegant"))
        engine.record(GenerationRequest(), make_outcome("classic-elegant"))
        engine.record(GenerationRequest(), failed_outcome())

        assert engine.run_learning_cycle() is False
        assert engine.get_status().totals.learning_cycles == 0

    def test_new_pattern_starts_at_initial_confidence(self, engine):
        """Test that a first observation is inserted at 0.7."""
        for _ in range(3):
            engine.record(GenerationRequest(), make_outcome("classic-elegant"))

        assert engine.run_learning_cycle() is True

        learned = pattern(engine, "classic-elegant", "layoutStructure", "css-grid")
        assert learned.confidence == pytest.approx(0.7)
        assert learned.usage_count == 1
        assert learned.source == "learned"
        assert pattern(engine, "classic-elegant", "typography", "Bodoni Moda") is not None

    def test_common_colors_need_two_records(self, engine):
        """Test that colors must appear in more than one record."""
        for style_id in ("classic-elegant", "premium-luxury", "luxury-real-estate"):
            engine.record(GenerationRequest(), make_outcome(style_id))

        engine.run_learning_cycle()

        assert engine.get_patterns("premium-luxury")["colorUsage"] == []
        assert pattern(engine, "premium-luxury", "layoutStructure", "flexbox") is not None

    def test_double_cycle_is_idempotent(self, engine):
        """Test that replaying the same five records does not double count."""
        for _ in range(5):
            engine.record(GenerationRequest(), make_outcome("classic-elegant"))

        assert engine.run_learning_cycle() is True
        after_one = engine.export_pattern_library()

        assert engine.run_learning_cycle() is False
        after_two = engine.export_pattern_library()

        assert after_two.patterns == after_one.patterns
        assert pattern(engine, "classic-elegant", "layoutStructure", "css-grid").usage_count == 1
        assert engine.get_status().totals.learning_cycles == 1
        assert engine.get_status().incorporated_count == 5

    def test_confidence_bounded_and_non_decreasing(self, engine):
        """Test that repeated observations raise confidence up to 0.95."""
        history = []
        for _ in range(8):
            for _ in range(3):
                engine.record(GenerationRequest(), make_outcome("classic-elegant"))
            assert engine.run_learning_cycle() is True
            history.append(pattern(engine, "classic-elegant", "layoutStructure", "css-grid").confidence)

        assert history == sorted(history)
        assert history[0] == pytest.approx(0.7)
        assert history[1] == pytest.approx(0.75)
        assert max(history) == pytest.approx(0.95)

        for patterns in engine.export_pattern_library().patterns.values():
            for entries in patterns.values():
                for entry in entries:
                    assert 0 <= entry.confidence <= 0.95

    def test_failures_never_learned(self, engine):
        """Test that failed generations appear in totals but not in patterns."""
        before = engine.export_pattern_library().patterns
        for _ in range(5):
            engine.record(GenerationRequest(), failed_outcome())

        assert engine.run_learning_cycle() is False
        assert engine.export_pattern_library().patterns == before
        assert engine.get_status().totals.failed == 5

    def test_automatic_trigger(self):
        """Test that the fifth record triggers a cycle."""
        engine = LearningEngine(config=LearningConfig(min_samples_for_learning=5))
        for _ in range(4):
            engine.record(GenerationRequest(), make_outcome("luxury-real-estate"))
        assert engine.get_status().totals.learning_cycles == 0

        engine.record(GenerationRequest(), make_outcome("luxury-real-estate"))

        assert engine.get_status().totals.learning_cycles == 1
        accent = pattern(engine, "luxury-real-estate", "colorUsage", "#d4af37")
        assert accent.confidence >= 0.7
        assert accent.usage_count == 1

    def test_checkpoint_callback(self):
        """Test that each completed cycle hands out a snapshot."""
        snapshots = []
        engine = LearningEngine(
            config=LearningConfig(min_samples_for_learning=100),
            on_checkpoint=snapshots.append,
        )
        for _ in range(3):
            engine.record(GenerationRequest(), make_outcome("classic-elegant"))
        engine.run_learning_cycle()

        assert len(snapshots) == 1
        assert isinstance(snapshots[0], PatternLibrarySnapshot)
        assert len(snapshots[0].incorporated_record_ids) == 3

    def test_checkpoint_runs_without_lock(self):
        """Test that other threads can read status while the callback of an automatic cycle runs."""
        seen = {}

        def persist(snapshot):
            def read_status():
                seen["status"] = engine.get_status()

            reader = threading.Thread(target=read_status)
            reader.start()
            reader.join(timeout=2)
            seen["reader_blocked"] = reader.is_alive()

        engine = LearningEngine(config=LearningConfig(min_samples_for_learning=3), on_checkpoint=persist)
        for _ in range(3):
            engine.record(GenerationRequest(), make_outcome("classic-elegant"))

        assert seen["reader_blocked"] is False
        assert seen["status"].totals.learning_cycles == 1
        assert seen["status"].record_count == 3

    def test_checkpoint_failure_is_contained(self):
        """Test that a failing checkpoint callback does not break the cycle."""
        def broken(snapshot):
            raise RuntimeError("storage offline")

        engine = LearningEngine(config=LearningConfig(min_samples_for_learning=100), on_checkpoint=broken)
        for _ in range(3):
            engine.record(GenerationRequest(), make_outcome("classic-elegant"))

        assert engine.run_learning_cycle() is True


class TestLibrarySnapshots:
    """Tests for export and restore."""

    def test_restore_round_trip(self):
        """Test that a restored library equals the exported one."""
        source = LearningEngine(config=LearningConfig(min_samples_for_learning=100))
        for _ in range(3):
            source.record(GenerationRequest(), make_outcome("premium-luxury"))
        source.run_learning_cycle()
        snapshot = source.export_pattern_library()

        target = LearningEngine(config=LearningConfig(min_samples_for_learning=100))
        assert target.load_pattern_library(snapshot.model_dump(mode="json")) is True

        restored = target.export_pattern_library()
        assert restored.patterns == snapshot.patterns
        assert restored.incorporated_record_ids == snapshot.incorporated_record_ids

    def test_invalid_snapshot(self):
        """Test that an unreadable snapshot is rejected without raising."""
        engine = LearningEngine()
        before = engine.export_pattern_library().patterns

        assert engine.load_pattern_library({"patterns": "nope"}) is False
        assert engine.export_pattern_library().patterns == before

    def test_exported_patterns_are_copies(self):
        """Test that mutating an export does not touch the library."""
        engine = LearningEngine()
        exported = engine.get_patterns("luxury-real-estate")
        exported["colorUsage"][0].usage_count = 99

        assert engine.get_patterns("luxury-real-estate")["colorUsage"][0].usage_count == 0

    def test_export_learning_data(self):
        """Test recent record summaries, most recent first."""
        engine = LearningEngine(config=LearningConfig(min_samples_for_learning=100))
        first = engine.record(GenerationRequest(), make_outcome("classic-elegant"))
        last = engine.record(GenerationRequest(), failed_outcome())

        export = engine.export_learning_data(limit=10)

        assert [r.id for r in export.recent_records] == [last, first]
        assert export.recent_records[0].success is False
        assert export.status.record_count == 2


class TestConcurrency:
    """Tests for concurrent recording."""

    def test_parallel_records(self):
        """Test that totals stay consistent under concurrent writers."""
        engine = LearningEngine(config=LearningConfig(min_samples_for_learning=5))
        outcome = make_outcome("modern-contemporary")

        def worker():
            for _ in range(10):
                engine.record(GenerationRequest(), outcome)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        status = engine.get_status()
        assert status.totals.generated == 80
        assert status.record_count == 80
        assert status.totals.succeeded == 80
        assert status.incorporated_count <= 80
