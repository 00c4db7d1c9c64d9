"""
Online lobby: two seats around one GameState, a short shareable code, a chat log and rematch votes.

Lobby objects are plain domain objects. Serialising access to them is the store's job (see src/store/).
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from random import Random
from typing import Optional

from src.connect_four.game import GameState, utc_now
from src.core.exceptions import InvalidRequestError, RematchNotAvailableError
from src.core.shared_types import Side

# no 0/O or 1/I, the code gets read out loud / typed over
LOBBY_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
LOBBY_CODE_LENGTH = 4
LOBBY_CODE_PATTERN = re.compile(rf"^[{LOBBY_CODE_ALPHABET}]{{{LOBBY_CODE_LENGTH}}}$")

CHAT_MAX_LENGTH = 240
CHAT_HISTORY_LIMIT = 200
CHAT_NAME_MAX_LENGTH = 24


def normalize_code(code: str) -> str:
    return code.strip().upper()


def is_valid_code(code: str) -> bool:
    return bool(LOBBY_CODE_PATTERN.match(code))


def generate_code(rng: Random) -> str:
    return "".join(rng.choice(LOBBY_CODE_ALPHABET) for _ in range(LOBBY_CODE_LENGTH))


@dataclass(frozen=True)
class ChatMessage:
    id: int
    timestamp: datetime
    side: Side
    name: str
    text: str


@dataclass
class Lobby:
    code: str
    state: GameState
    has_red: bool = True
    has_yellow: bool = False
    messages: list[ChatMessage] = field(default_factory=list)
    next_message_id: int = 1
    rematch_votes: set[Side] = field(default_factory=set)
    last_activity: datetime = field(default_factory=utc_now)

    # chat limits, the service overrides them from Settings
    chat_max_length: int = CHAT_MAX_LENGTH
    chat_history_limit: int = CHAT_HISTORY_LIMIT
    chat_name_max_length: int = CHAT_NAME_MAX_LENGTH

    def seat(self, side: Side) -> None:
        """Idempotent: taking a seat twice changes nothing."""
        if side == Side.RED:
            self.has_red = True
        else:
            self.has_yellow = True

    def is_seated(self, side: Side) -> bool:
        return self.has_red if side == Side.RED else self.has_yellow

    @property
    def is_full(self) -> bool:
        return self.has_red and self.has_yellow

    # --- CHAT ---
    def post_message(
        self, side: Side, name: str, text: str, now: Optional[datetime] = None
    ) -> ChatMessage:
        """
        Append a message to the log.
        ----

        * blank text is refused
        * text and name are truncated to their maximum length, an empty name falls back to the side's display name
        * ids increase monotonically, the log only keeps the latest `chat_history_limit` messages
        """
        text = text.strip()
        if not text:
            raise InvalidRequestError("Chat message is empty.")

        name = name.strip()[: self.chat_name_max_length] or self.state.names[side]
        message = ChatMessage(
            id=self.next_message_id,
            timestamp=now or utc_now(),
            side=side,
            name=name,
            text=text[: self.chat_max_length],
        )
        self.next_message_id += 1
        self.messages.append(message)
        if len(self.messages) > self.chat_history_limit:
            del self.messages[: len(self.messages) - self.chat_history_limit]
        return message

    def messages_since(self, since_id: int) -> list[ChatMessage]:
        """Messages with an id strictly greater than `since_id`, oldest first."""
        return [message for message in self.messages if message.id > since_id]

    @property
    def latest_message_id(self) -> int:
        return self.messages[-1].id if self.messages else 0

    # --- REMATCH ---
    def vote_rematch(self, side: Side, rng: Optional[Random] = None) -> bool:
        """
        Register a vote for another round. Returns True when the vote started the new round.

        NOTE: Only allowed once the current round is over. When both seats voted, the round restarts with the scores kept.
        """
        if not self.state.game_over:
            raise RematchNotAvailableError("The current round is still being played.")

        self.rematch_votes.add(side)
        if self.rematch_votes != {Side.RED, Side.YELLOW}:
            return False

        self.state.replay_keeping_score(rng)
        self.rematch_votes.clear()
        return True

    def touch(self, now: Optional[datetime] = None) -> None:
        self.last_activity = now or utc_now()
