import asyncio
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass

from causelist.classification.base import BaseRecordClassifier
from causelist.classification.factory import ClassifierFactory
from causelist.classification.identifiers import RecordIdFactory
from causelist.classification.models import Record
from causelist.config.settings import Settings
from causelist.logging.logger import Log
from causelist.pdf.base import BasePageExtractor
from causelist.pdf.exceptions import DocumentParseError
from causelist.pdf.factory import PageExtractorFactory
from causelist.pipeline.assembler import assemble_result
from causelist.pipeline.exceptions import PipelineBusyError
from causelist.pipeline.models import Document, PageText, PipelineResult, ProgressState, Stage
from causelist.pipeline.progress import (
    AnalysisStarted,
    ChunkCompleted,
    ExtractionProgress,
    ProgressObserver,
    ProgressTracker,
    RunFailed,
    RunFinished,
    RunStarted,
)

DEFAULT_CHUNK_SIZE = 3


@dataclass(frozen=True)
class ChunkAccumulator:
    """Records merged so far, folded chunk by chunk."""

    records: tuple[Record, ...] = ()
    pages_processed: int = 0

    def merge(self, page_results: Sequence[tuple[int, list[Record]]]) -> "ChunkAccumulator":
        ordered = sorted(page_results, key=lambda result: result[0])
        merged = [record for _, records in ordered for record in records]
        return ChunkAccumulator(
            records=self.records + tuple(merged),
            pages_processed=self.pages_processed + len(page_results),
        )


def partition(pages: Sequence[PageText], chunk_size: int) -> Iterator[Sequence[PageText]]:
    """Yield consecutive, order-preserving chunks of at most chunk_size pages."""
    for start in range(0, len(pages), chunk_size):
        yield pages[start : start + chunk_size]


class ChunkedPipeline:
    """Orchestrates a run: extract pages -> classify in chunks -> assemble.

    Chunks run one after another; pages inside a chunk are classified
    concurrently, so at most chunk_size classification calls are in flight.
    """

    def __init__(
        self,
        extractor: BasePageExtractor,
        classifier: BaseRecordClassifier,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
        self._extractor = extractor
        self._classifier = classifier
        self._chunk_size = chunk_size
        self._tracker = ProgressTracker()
        self._running = False

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def state(self) -> ProgressState:
        return self._tracker.state

    def subscribe(self, observer: ProgressObserver) -> Callable[[], None]:
        """Receive a ProgressState snapshot after every update."""
        return self._tracker.subscribe(observer)

    async def run(self, document: Document) -> PipelineResult:
        """Run the full pipeline for a document.

        Raises:
            DocumentParseError: if no page text could be extracted. The
                                stage is left at error and no result exists.
            PipelineBusyError: if this pipeline is already running.
        """
        if self._running:
            raise PipelineBusyError("A run is already in progress for this pipeline")
        self._running = True
        try:
            return await self._run(document)
        except Exception as exc:
            if self.state.stage is not Stage.ERROR:
                Log.exception(f"Unexpected error processing '{document.name}'")
                self._tracker.apply(
                    RunFailed(message=f"Failed to process document '{document.name}': {exc}")
                )
            raise
        finally:
            self._running = False

    async def _run(self, document: Document) -> PipelineResult:
        Log.info(f"Processing document '{document.name}' ({len(document.content)} bytes)")
        self._tracker.apply(RunStarted())

        try:
            pages = await self._extractor.extract(document, self._on_extraction_progress)
        except DocumentParseError as exc:
            Log.error(f"Extraction failed for '{document.name}': {exc}")
            self._tracker.apply(
                RunFailed(message=f"Failed to process document '{document.name}': {exc}")
            )
            raise
        Log.info(f"Extracted {len(pages)} pages from '{document.name}'")

        self._tracker.apply(AnalysisStarted(total_pages=len(pages)))
        accumulator = ChunkAccumulator()
        for chunk in partition(pages, self._chunk_size):
            accumulator = await self._process_chunk(accumulator, chunk)
            self._tracker.apply(ChunkCompleted(pages_processed=accumulator.pages_processed))
            Log.debug(f"Analyzed {accumulator.pages_processed}/{len(pages)} pages")

        result = assemble_result(document.name, accumulator.records)
        self._tracker.apply(RunFinished())
        Log.info(
            f"Document '{document.name}' complete: "
            f"{len(result.records)} cases from {len(pages)} pages"
        )
        return result

    def _on_extraction_progress(self, current: int, total: int) -> None:
        self._tracker.apply(ExtractionProgress(current=current, total=total))

    async def _process_chunk(
        self,
        accumulator: ChunkAccumulator,
        chunk: Sequence[PageText],
    ) -> ChunkAccumulator:
        page_results = await asyncio.gather(*(self._classify_page(page) for page in chunk))
        return accumulator.merge(page_results)

    async def _classify_page(self, page: PageText) -> tuple[int, list[Record]]:
        """Classify one page, tagged with its index; failures count as no records."""
        try:
            records = await self._classifier.classify(page.text, page.index)
        except Exception:
            Log.exception(f"Classifier raised for page {page.index}, continuing without it")
            records = []
        return page.index, records


def build_pipeline(
    settings: Settings,
    id_factory: RecordIdFactory | None = None,
) -> ChunkedPipeline:
    """Build a ChunkedPipeline with the configured adapters."""
    return ChunkedPipeline(
        extractor=PageExtractorFactory.create(settings),
        classifier=ClassifierFactory.create(settings, id_factory=id_factory),
        chunk_size=settings.chunk_size,
    )
