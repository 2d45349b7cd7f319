"""
Pinterest Aggregates
"""

from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Tuple

from ..aggregate import CapturedContent
from ..composites import CompositeAggregate
from ..errors import ValidationError
from ..events import DomainEvent
from ..policies import DownloadLifecycle
from ..profiles import ProfileAggregate
from .value_objects import BoardAttributes, BoardId, PinId, PinMetadata, PinterestProfile, UserId


class Pin(CapturedContent[PinMetadata]):
    """Captured pin, optionally filed on a board."""

    AGGREGATE_TYPE = "pinterest.pin"
    KIND = "pin"
    ID_TYPE = PinId
    OWNER_TYPE = UserId
    OWNER_KEY = "creator_id"
    ATTRIBUTES_TYPE = PinMetadata
    ENGAGEMENT_FIELDS = ("repin_count", "comment_count")

    def __init__(
        self,
        content_id: PinId,
        owner_id: UserId,
        attributes: PinMetadata,
        captured_at: Optional[datetime] = None,
        lifecycle: Optional[DownloadLifecycle] = None,
        board_id: Optional[BoardId] = None,
    ):
        if board_id is not None and not isinstance(board_id, BoardId):
            raise ValidationError("board_id", "must be a BoardId")
        super().__init__(content_id, owner_id, attributes, captured_at, lifecycle)
        self._board_id = board_id

    @property
    def metadata(self) -> PinMetadata:
        return self._attributes

    @property
    def board_id(self) -> Optional[BoardId]:
        return self._board_id

    def source_url(self) -> Optional[str]:
        return self._attributes.original_image_url

    def assign_to_board(self, board_id: BoardId) -> None:
        """File the pin on a board; no event."""
        if not isinstance(board_id, BoardId):
            raise ValidationError("board_id", "must be a BoardId")
        self._board_id = board_id

    def refresh_metrics(self, repin_count: int, comment_count: int) -> None:
        """Overwrite repin and comment counts; no event."""
        self.update_engagement(repin_count=repin_count, comment_count=comment_count)

    def _captured_payload(self) -> Dict[str, Any]:
        payload = super()._captured_payload()
        payload["board_id"] = str(self._board_id) if self._board_id else None
        return payload

    def _download_request_extras(self) -> Dict[str, Any]:
        return {"board_id": str(self._board_id) if self._board_id else None}

    def _extra_state(self) -> Dict[str, Any]:
        return {"board_id": str(self._board_id) if self._board_id else None}

    @classmethod
    def _restore_kwargs(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {"board_id": BoardId(data["board_id"]) if data.get("board_id") else None}

    @classmethod
    def _extra_from_payload(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        if not data.get("board_id"):
            return {}
        try:
            return {"board_id": BoardId(data["board_id"])}
        except ValidationError as e:
            raise ValidationError("board_id", e.reason)


class Board(CompositeAggregate):
    """Pinterest board; adding a pin already on the board is a no-op."""

    AGGREGATE_TYPE = "pinterest.board"
    KIND = "board"
    ID_TYPE = BoardId
    OWNER_TYPE = UserId
    ATTRIBUTES_TYPE = BoardAttributes
    MEMBER_TYPE = PinId
    MEMBER_LABEL = "pin"

    @property
    def name(self) -> str:
        return self._attributes.name

    @property
    def pin_ids(self) -> Tuple[PinId, ...]:
        return self.member_ids

    @property
    def pin_count(self) -> int:
        return self.member_count

    def is_private(self) -> bool:
        return self._attributes.is_private

    def add_pin(self, pin_id: PinId) -> None:
        self._add_member(pin_id)

    def remove_pin(self, pin_id: PinId) -> None:
        """
        Raises:
            NotAMemberError: If the pin is not on the board
        """
        self._remove_member(pin_id)

    def sync_pins(self, pin_ids: Iterable[PinId]) -> DomainEvent:
        """Replace the board's pins; records ``board.synced``."""
        return self._sync_members(pin_ids)


class PinterestUser(ProfileAggregate):
    """Pinterest account; statistics refresh silently."""

    AGGREGATE_TYPE = "pinterest.user"
    KIND = "user"
    ID_TYPE = UserId
    PROFILE_TYPE = PinterestProfile
    STAT_FIELDS = ("follower_count", "following_count", "board_count", "pin_count")

    @property
    def username(self) -> str:
        return self._profile.username
