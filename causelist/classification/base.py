from abc import ABC, abstractmethod

from causelist.classification.models import Record


class BaseRecordClassifier(ABC):
    """Contract for all page classifiers."""

    @abstractmethod
    async def classify(self, page_text: str, page_index: int) -> list[Record]:
        """Extract the cases listed on one page.

        Args:
            page_text: Text of a single page.
            page_index: 1-based page number, used to tag and identify records.

        Returns:
            Records in the order the provider listed them. Empty when the
            page holds no cases or classification failed; implementations
            must never raise.
        """
