from pathlib import Path

from causelist.config.settings import Settings
from causelist.logging.logger import Log
from causelist.pipeline.file_loader import FileLoader
from causelist.pipeline.models import PipelineResult
from causelist.pipeline.pipeline import build_pipeline
from causelist.pipeline.progress import ProgressObserver


async def analyze_file(
    path: Path,
    settings: Settings | None = None,
    observer: ProgressObserver | None = None,
) -> PipelineResult:
    """Entry point: configure logging -> load document -> build pipeline -> run."""
    settings = settings or Settings()
    Log.configure(settings.log_level)

    document = FileLoader().load(path)
    pipeline = build_pipeline(settings)
    if observer is not None:
        pipeline.subscribe(observer)
    return await pipeline.run(document)
