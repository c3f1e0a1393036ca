from abc import ABC, abstractmethod
from collections.abc import Callable

from causelist.pipeline.models import Document, PageText

# Called as on_progress(page_index, total_pages).
ProgressCallback = Callable[[int, int], None]


class BasePageExtractor(ABC):
    """Contract for all PDF page text extraction adapters."""

    @abstractmethod
    async def extract(
        self,
        document: Document,
        on_progress: ProgressCallback,
    ) -> list[PageText]:
        """Extract the text of every page, in document order.

        Args:
            document: Document whose content is raw PDF bytes.
            on_progress: Invoked exactly once per page, with strictly
                         increasing page index, before that page is read.

        Returns:
            One PageText per physical page, 1-based.

        Raises:
            DocumentParseError: if the document cannot be read. No partial
                                result is returned.
        """
