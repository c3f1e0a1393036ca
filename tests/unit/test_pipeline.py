"""Tests for ChunkedPipeline orchestration."""

import asyncio

import pytest

from causelist.classification.base import BaseRecordClassifier
from causelist.classification.models import CaseCategory, Record
from causelist.config.settings import Settings
from causelist.pdf.base import BasePageExtractor, ProgressCallback
from causelist.pdf.exceptions import DocumentParseError
from causelist.pipeline.exceptions import PipelineBusyError
from causelist.pipeline.models import Document, PageText, ProgressState, Stage
from causelist.pipeline.pipeline import ChunkAccumulator, ChunkedPipeline, build_pipeline, partition


class FakeExtractor(BasePageExtractor):
    """Reports progress per page; optionally fails the first N calls."""

    def __init__(self, page_count: int, failures: int = 0) -> None:
        self._page_count = page_count
        self._failures = failures
        self.calls = 0

    async def extract(self, document: Document, on_progress: ProgressCallback) -> list[PageText]:
        self.calls += 1
        if self.calls <= self._failures:
            raise DocumentParseError(f"{document.name} is not a PDF")
        pages = []
        for index in range(1, self._page_count + 1):
            on_progress(index, self._page_count)
            await asyncio.sleep(0)
            pages.append(PageText(index=index, text=f"text of page {index}"))
        return pages


class FakeClassifier(BaseRecordClassifier):
    """One record per page; tracks how many calls are in flight."""

    def __init__(
        self,
        delays: dict[int, float] | None = None,
        raising_pages: frozenset[int] = frozenset(),
        empty_pages: frozenset[int] = frozenset(),
        records_per_page: int = 1,
    ) -> None:
        self._delays = delays or {}
        self._raising_pages = raising_pages
        self._empty_pages = empty_pages
        self._records_per_page = records_per_page
        self.in_flight = 0
        self.max_in_flight = 0
        self.completion_order: list[int] = []

    async def classify(self, page_text: str, page_index: int) -> list[Record]:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self._delays.get(page_index, 0))
            self.completion_order.append(page_index)
            if page_index in self._raising_pages:
                raise RuntimeError(f"provider exploded on page {page_index}")
            if page_index in self._empty_pages:
                return []
            return [
                _record(page_index, position) for position in range(self._records_per_page)
            ]
        finally:
            self.in_flight -= 1


def _record(page_index: int, position: int = 0) -> Record:
    return Record(
        id=f"p{page_index}_c{position}",
        page_index=page_index,
        case_number=f"{page_index}/{position}",
        title="A v. B",
        category=CaseCategory.CIVIL,
        summary="Rent dispute",
    )


def _document() -> Document:
    return Document(name="list.pdf", content=b"%PDF-fake")


def _collect(pipeline: ChunkedPipeline) -> list[ProgressState]:
    states: list[ProgressState] = []
    pipeline.subscribe(states.append)
    return states


class TestPartition:
    def test_groups_consecutive_pages(self) -> None:
        pages = [PageText(index=i, text="") for i in range(1, 8)]
        chunks = [[p.index for p in chunk] for chunk in partition(pages, 3)]
        assert chunks == [[1, 2, 3], [4, 5, 6], [7]]

    def test_empty_input_yields_nothing(self) -> None:
        assert list(partition([], 3)) == []


class TestChunkAccumulator:
    def test_merges_by_page_index_not_arrival(self) -> None:
        acc = ChunkAccumulator().merge([(2, [_record(2)]), (1, [_record(1)])])
        assert [r.page_index for r in acc.records] == [1, 2]
        assert acc.pages_processed == 2

    def test_merge_returns_new_accumulator(self) -> None:
        first = ChunkAccumulator()
        second = first.merge([(1, [_record(1)])])
        assert first.records == ()
        assert len(second.records) == 1


class TestSevenPageScenario:
    @pytest.mark.asyncio
    async def test_records_in_page_order(self) -> None:
        pipeline = ChunkedPipeline(FakeExtractor(7), FakeClassifier(), chunk_size=3)
        result = await pipeline.run(_document())
        assert [r.id for r in result.records] == [f"p{i}_c0" for i in range(1, 8)]
        assert result.source_name == "list.pdf"

    @pytest.mark.asyncio
    async def test_analysis_progress_advances_by_chunk(self) -> None:
        pipeline = ChunkedPipeline(FakeExtractor(7), FakeClassifier(), chunk_size=3)
        states = _collect(pipeline)
        await pipeline.run(_document())
        analyzing = [s.current for s in states if s.stage is Stage.ANALYZING]
        assert analyzing == [0, 3, 6, 7]
        assert states[-1] == ProgressState(stage=Stage.COMPLETE, current=7, total=7)

    @pytest.mark.asyncio
    async def test_extraction_progress_reports_every_page(self) -> None:
        pipeline = ChunkedPipeline(FakeExtractor(7), FakeClassifier(), chunk_size=3)
        states = _collect(pipeline)
        await pipeline.run(_document())
        extracting = [(s.current, s.total) for s in states if s.stage is Stage.EXTRACTING]
        assert extracting == [(0, 0)] + [(i, 7) for i in range(1, 8)]


class TestOrdering:
    @pytest.mark.asyncio
    async def test_order_preserved_when_later_pages_resolve_first(self) -> None:
        delays = {i: (8 - i) * 0.005 for i in range(1, 8)}
        classifier = FakeClassifier(delays=delays, records_per_page=2)
        pipeline = ChunkedPipeline(FakeExtractor(7), classifier, chunk_size=3)

        result = await pipeline.run(_document())

        assert classifier.completion_order[:3] == [3, 2, 1]
        assert [(r.page_index, r.id) for r in result.records] == [
            (page, f"p{page}_c{pos}") for page in range(1, 8) for pos in range(2)
        ]


class TestBackpressure:
    @pytest.mark.parametrize("chunk_size", [1, 2, 3, 5])
    @pytest.mark.asyncio
    async def test_in_flight_calls_never_exceed_chunk_size(self, chunk_size: int) -> None:
        classifier = FakeClassifier(delays={i: 0.002 for i in range(1, 11)})
        pipeline = ChunkedPipeline(FakeExtractor(10), classifier, chunk_size=chunk_size)
        await pipeline.run(_document())
        assert classifier.max_in_flight == chunk_size

    def test_rejects_non_positive_chunk_size(self) -> None:
        with pytest.raises(ValueError, match="chunk_size"):
            ChunkedPipeline(FakeExtractor(1), FakeClassifier(), chunk_size=0)


class TestPartialFailure:
    @pytest.mark.asyncio
    async def test_empty_page_does_not_affect_others(self) -> None:
        pipeline = ChunkedPipeline(
            FakeExtractor(5), FakeClassifier(empty_pages=frozenset({3})), chunk_size=3
        )
        states = _collect(pipeline)
        result = await pipeline.run(_document())
        assert [r.page_index for r in result.records] == [1, 2, 4, 5]
        assert states[-1].stage is Stage.COMPLETE

    @pytest.mark.asyncio
    async def test_raising_classifier_is_absorbed(self) -> None:
        pipeline = ChunkedPipeline(
            FakeExtractor(5), FakeClassifier(raising_pages=frozenset({2})), chunk_size=3
        )
        result = await pipeline.run(_document())
        assert [r.page_index for r in result.records] == [1, 3, 4, 5]
        assert pipeline.state.stage is Stage.COMPLETE
        assert pipeline.state.current == 5


class TestExtractionFailure:
    @pytest.mark.asyncio
    async def test_parse_error_ends_in_error_stage(self) -> None:
        classifier = FakeClassifier()
        pipeline = ChunkedPipeline(FakeExtractor(3, failures=1), classifier)
        with pytest.raises(DocumentParseError):
            await pipeline.run(_document())
        assert pipeline.state.stage is Stage.ERROR
        assert pipeline.state.message is not None
        assert "list.pdf" in pipeline.state.message
        assert classifier.completion_order == []

    @pytest.mark.asyncio
    async def test_next_run_succeeds_without_leftover_state(self) -> None:
        pipeline = ChunkedPipeline(FakeExtractor(4, failures=1), FakeClassifier(), chunk_size=3)
        with pytest.raises(DocumentParseError):
            await pipeline.run(_document())

        states = _collect(pipeline)
        result = await pipeline.run(_document())

        assert [r.page_index for r in result.records] == [1, 2, 3, 4]
        assert states[0] == ProgressState(stage=Stage.EXTRACTING)
        assert states[-1] == ProgressState(stage=Stage.COMPLETE, current=4, total=4)

    @pytest.mark.asyncio
    async def test_unexpected_extractor_error_marks_run_failed(self) -> None:
        class BrokenExtractor(BasePageExtractor):
            async def extract(
                self, document: Document, on_progress: ProgressCallback
            ) -> list[PageText]:
                raise RuntimeError("disk on fire")

        pipeline = ChunkedPipeline(BrokenExtractor(), FakeClassifier())
        with pytest.raises(RuntimeError):
            await pipeline.run(_document())
        assert pipeline.state.stage is Stage.ERROR


class TestRunLifecycle:
    @pytest.mark.asyncio
    async def test_empty_document_completes(self) -> None:
        pipeline = ChunkedPipeline(FakeExtractor(0), FakeClassifier())
        result = await pipeline.run(_document())
        assert result.records == ()
        assert pipeline.state == ProgressState(stage=Stage.COMPLETE)

    @pytest.mark.asyncio
    async def test_concurrent_run_is_rejected(self) -> None:
        classifier = FakeClassifier(delays={1: 0.02})
        pipeline = ChunkedPipeline(FakeExtractor(1), classifier)
        task = asyncio.create_task(pipeline.run(_document()))
        await asyncio.sleep(0)

        with pytest.raises(PipelineBusyError):
            await pipeline.run(_document())

        result = await task
        assert len(result.records) == 1

    @pytest.mark.asyncio
    async def test_failing_observer_does_not_abort_run(self) -> None:
        pipeline = ChunkedPipeline(FakeExtractor(2), FakeClassifier())

        def broken_observer(state: ProgressState) -> None:
            raise RuntimeError("ui went away")

        pipeline.subscribe(broken_observer)
        result = await pipeline.run(_document())
        assert len(result.records) == 2

    @pytest.mark.asyncio
    async def test_unsubscribe_stops_notifications(self) -> None:
        pipeline = ChunkedPipeline(FakeExtractor(2), FakeClassifier())
        states: list[ProgressState] = []
        unsubscribe = pipeline.subscribe(states.append)
        unsubscribe()
        await pipeline.run(_document())
        assert states == []


class TestBuildPipeline:
    def test_uses_configured_chunk_size(self) -> None:
        settings = Settings(classifier_provider="example", chunk_size=5)
        pipeline = build_pipeline(settings)
        assert pipeline.chunk_size == 5
