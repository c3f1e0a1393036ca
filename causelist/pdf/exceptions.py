class DocumentParseError(Exception):
    """Raised when a document cannot be turned into page text.

    Fatal for a pipeline run: no partial pages are ever returned.
    """
