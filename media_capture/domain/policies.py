"""
Lifecycle Policies

Rules shared by otherwise unrelated aggregate types: the idempotent
download guard, expiry checks, counter refreshes and membership
reconciliation for boards, collections, playlists and threads.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Generic, Iterable, Iterator, List, Optional, Sequence, Tuple, TypeVar

from .clock import format_timestamp, parse_timestamp, utcnow
from .errors import AlreadyDownloadedError, InvalidStateError, NotAMemberError
from .value_objects import ValueObject, require_text

M = TypeVar("M")
A = TypeVar("A", bound=ValueObject)


class LifecycleState(Enum):
    """Download lifecycle of a captured artifact."""
    CAPTURED = "captured"
    DOWNLOAD_REQUESTED = "download_requested"
    DOWNLOADED = "downloaded"

    def is_terminal(self) -> bool:
        """Check if no further download transitions are possible."""
        return self is LifecycleState.DOWNLOADED


@dataclass
class DownloadLifecycle:
    """
    Idempotent download guard.

    Holds the explicit lifecycle state together with the timestamps and
    local path that belong to it, so phase is never inferred from which
    optional timestamps happen to be set.
    """

    state: LifecycleState = LifecycleState.CAPTURED
    requested_at: Optional[datetime] = None
    request_count: int = 0
    local_path: Optional[str] = None
    downloaded_at: Optional[datetime] = None

    def is_downloaded(self) -> bool:
        return self.state.is_terminal()

    def request(self, label: str, now: Optional[datetime] = None) -> datetime:
        """
        Register a download request.

        Re-requesting before completion is tolerated.

        Raises:
            AlreadyDownloadedError: If the download already completed
        """
        if self.is_downloaded():
            raise AlreadyDownloadedError(f"{label} is already downloaded")
        now = now or utcnow()
        self.state = LifecycleState.DOWNLOAD_REQUESTED
        self.requested_at = now
        self.request_count += 1
        return now

    def complete(self, label: str, local_path: str, now: Optional[datetime] = None) -> datetime:
        """
        Record download completion exactly once.

        Raises:
            AlreadyDownloadedError: If the download already completed
            ValidationError: If local_path is empty
        """
        if self.is_downloaded():
            raise AlreadyDownloadedError(f"{label} is already downloaded")
        require_text("local_path", local_path)
        now = now or utcnow()
        self.state = LifecycleState.DOWNLOADED
        self.local_path = local_path
        self.downloaded_at = now
        return now

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "requested_at": format_timestamp(self.requested_at) if self.requested_at else None,
            "request_count": self.request_count,
            "local_path": self.local_path,
            "downloaded_at": format_timestamp(self.downloaded_at) if self.downloaded_at else None,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "DownloadLifecycle":
        if not data:
            return cls()
        return cls(
            state=LifecycleState(data.get("state", LifecycleState.CAPTURED.value)),
            requested_at=parse_timestamp(data["requested_at"]) if data.get("requested_at") else None,
            request_count=int(data.get("request_count", 0)),
            local_path=data.get("local_path"),
            downloaded_at=parse_timestamp(data["downloaded_at"]) if data.get("downloaded_at") else None,
        )


def has_expired(expires_at: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """
    Expiry check, recomputed on every call.

    Content without an expiry never expires.
    """
    if expires_at is None:
        return False
    return (now or utcnow()) > expires_at


def overwrite_counters(attributes: A, **counters: int) -> A:
    """
    Replace counters on an attribute bundle with the latest snapshot.

    The new bundle is validated before it is returned, so a negative
    counter leaves the caller's current bundle untouched.
    """
    return replace(attributes, **counters)


class MembershipSet(Generic[M]):
    """
    Ordered set of member ids owned by a composite aggregate.

    Adding a present id is a no-op; removing an absent id fails.
    """

    def __init__(self, members: Iterable[M] = (), label: str = "member"):
        self._label = label
        self._members: List[M] = []
        for member in members:
            if member not in self._members:
                self._members.append(member)

    def __contains__(self, member: object) -> bool:
        return member in self._members

    def __iter__(self) -> Iterator[M]:
        return iter(list(self._members))

    def __len__(self) -> int:
        return len(self._members)

    def as_tuple(self) -> Tuple[M, ...]:
        return tuple(self._members)

    def add(self, member: M) -> bool:
        """Append a member; returns False when it was already present."""
        if member in self._members:
            return False
        self._members.append(member)
        return True

    def remove(self, member: M) -> None:
        """
        Remove a member.

        Raises:
            NotAMemberError: If the member is absent
        """
        if member not in self._members:
            raise NotAMemberError(f"{self._label} {member} is not a member")
        self._members.remove(member)

    def replace(self, members: Iterable[M]) -> Tuple[M, ...]:
        """Replace the whole membership; duplicates keep their first position."""
        snapshot: List[M] = []
        for member in members:
            if member not in snapshot:
                snapshot.append(member)
        self._members = snapshot
        return tuple(snapshot)

    def is_permutation(self, order: Sequence[M]) -> bool:
        """Check that ``order`` holds exactly the current members, once each."""
        if len(order) != len(self._members) or len(set(order)) != len(order):
            return False
        return set(order) == set(self._members)

    def reorder(self, order: Sequence[M]) -> None:
        """
        Reorder members.

        Raises:
            InvalidStateError: If ``order`` adds, drops or duplicates a member
        """
        order = list(order)
        if not self.is_permutation(order):
            raise InvalidStateError(
                f"New order must contain exactly the same {self._label}s"
            )
        self._members = order
