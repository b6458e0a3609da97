"""Domain exceptions raised at the storage boundary."""


class DataFetchFailure(Exception):
    """The backing store failed while loading rows for a computation.

    Callers must not run an aggregation on partial input: services catch this
    and hand back an empty, ``available=False`` result so the UI can offer a
    retry.
    """

    def __init__(self, source: str, message: str = "") -> None:
        self.source = source
        super().__init__(f"{source}: {message}" if message else source)
