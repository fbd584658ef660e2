class RequestSequencer:
    """Hands out increasing request numbers and tells whether one is still the latest.

    An async result is applied only if no newer request was started after it,
    so a slow, superseded response can never overwrite fresher state.
    """

    def __init__(self) -> None:
        self._latest = 0

    @property
    def latest(self) -> int:
        return self._latest

    def next(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, token: int) -> bool:
        return token == self._latest
