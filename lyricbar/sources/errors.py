class SourceError(RuntimeError):
    pass


class DocumentTooLarge(SourceError):
    """A fetched page went over the size cap; never silently truncated."""

    def __init__(self, url: str, limit: int):
        super().__init__(f"document at {url} exceeds {limit} bytes")
        self.url = url
        self.limit = limit
