"""Optimistic like state for a single loadout card.

The displayed values are the confirmed server values plus the delta of the
request still in flight.  When a request settles, its result is applied only
if it is the latest one issued; an older response arriving late is ignored.
"""

from dataclasses import dataclass


@dataclass
class PendingLike:
    request_id: int
    delta: int


class LikeProjection:
    def __init__(self, liked: bool, rating: int):
        self.confirmed_liked = liked
        self.confirmed_rating = rating
        self.pending: PendingLike | None = None
        self._last_request_id = 0

    @property
    def displayed_liked(self) -> bool:
        if self.pending is None or self.pending.delta == 0:
            return self.confirmed_liked
        return self.pending.delta > 0

    @property
    def displayed_rating(self) -> int:
        delta = self.pending.delta if self.pending else 0
        return self.confirmed_rating + delta

    @property
    def in_flight(self) -> bool:
        return self.pending is not None

    def begin(self) -> int:
        """Record a toggle about to be sent and return its request id.

        Toggles issued while another is in flight stack on its prediction, so
        two quick clicks display no net change.
        """
        self._last_request_id += 1
        delta = (self.pending.delta if self.pending else 0) + (-1 if self.displayed_liked else 1)
        self.pending = PendingLike(request_id=self._last_request_id, delta=delta)
        return self._last_request_id

    def settle(
        self,
        request_id: int,
        success: bool,
        liked: bool | None = None,
        rating: int | None = None,
    ) -> bool:
        """Reconcile with the server's answer for ``request_id``.

        Returns False (and changes nothing) when a newer request has been
        issued since.  On failure the pending delta is dropped and the
        confirmed values stand.
        """
        if request_id != self._last_request_id:
            return False
        pending = self.pending
        self.pending = None
        if not success:
            return True
        if liked is not None:
            self.confirmed_liked = liked
        elif pending is not None and pending.delta != 0:
            self.confirmed_liked = pending.delta > 0
        if rating is not None:
            self.confirmed_rating = rating
        elif pending is not None:
            self.confirmed_rating += pending.delta
        return True
