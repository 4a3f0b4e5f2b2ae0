from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

import numpy as np

from monetize_ai.types import CommunityMessage

FEED_USERS = ["Alex_Dev", "Sarah_SaaS", "Mike_Product", "Growth_Guru", "CodeNinja"]
FEED_PHRASES = [
    "Has anyone tried the new subscription model?",
    "Gemini Flash is incredibly fast for my wrapper app.",
    "What's a good churn rate for a B2B app?",
    "Just launched on Product Hunt! 🚀",
    "I'm struggling with user acquisition for my AI tool.",
    "The revenue simulator here is actually pretty accurate.",
    "Anyone want to partner up on a fitness app?",
    "Focus on distribution, not just features!",
]
AVATAR_COLORS = ["#ef4444", "#22c55e", "#eab308", "#a855f7", "#ec4899"]
SYSTEM_COLOR = "#0891b2"
MY_COLOR = "#2563eb"

WELCOME_TEXT = "Welcome to the Founder's Lounge! This is a live feed of developers discussing strategy."
MIN_INTERVAL_S = 5.0
MAX_INTERVAL_S = 10.0
INITIAL_ONLINE = 12
MAX_BACKLOG_S = 60.0  # catch-up window after the feed sat idle
MAX_HISTORY = 200


def _clock(ts: datetime) -> str:
    return ts.strftime("%H:%M")


class MockChatFeed:
    """Locally generated community chat.

    Synthetic messages are scheduled 5-10 seconds apart. Nothing runs in the
    background: callers `poll` with the current time and receive whatever has
    come due since the last poll.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None, start: Optional[datetime] = None):
        self.rng = rng if rng is not None else np.random.default_rng()
        start = start or datetime.now()
        self.messages: list[CommunityMessage] = [
            CommunityMessage(
                id="system-1",
                user="System",
                text=WELCOME_TEXT,
                timestamp=_clock(start),
                avatar_color=SYSTEM_COLOR,
            )
        ]
        self.online_users = INITIAL_ONLINE
        self._seq = 0
        self._next_at = start + self._next_interval()

    def _next_interval(self) -> timedelta:
        return timedelta(seconds=float(self.rng.uniform(MIN_INTERVAL_S, MAX_INTERVAL_S)))

    def _new_id(self) -> str:
        self._seq += 1
        return f"msg-{self._seq}"

    @property
    def next_message_at(self) -> datetime:
        return self._next_at

    def poll(self, now: Optional[datetime] = None) -> list[CommunityMessage]:
        now = now or datetime.now()
        # Skip what was missed while idle beyond the backlog window
        oldest = now - timedelta(seconds=MAX_BACKLOG_S)
        if self._next_at < oldest:
            self._next_at = oldest
        emitted: list[CommunityMessage] = []
        while self._next_at <= now:
            msg = CommunityMessage(
                id=self._new_id(),
                user=str(self.rng.choice(FEED_USERS)),
                text=str(self.rng.choice(FEED_PHRASES)),
                timestamp=_clock(self._next_at),
                avatar_color=str(self.rng.choice(AVATAR_COLORS)),
            )
            emitted.append(msg)
            # Online count drifts by one per incoming message
            self.online_users = max(1, self.online_users + (1 if self.rng.random() > 0.5 else -1))
            self._next_at += self._next_interval()
        self.messages.extend(emitted)
        self._trim()
        return emitted

    def _trim(self) -> None:
        if len(self.messages) > MAX_HISTORY:
            del self.messages[: len(self.messages) - MAX_HISTORY]

    def post(self, text: str, now: Optional[datetime] = None) -> Optional[CommunityMessage]:
        if not text.strip():
            return None
        msg = CommunityMessage(
            id=self._new_id(),
            user="You",
            text=text.strip(),
            timestamp=_clock(now or datetime.now()),
            is_me=True,
            avatar_color=MY_COLOR,
        )
        self.messages.append(msg)
        self._trim()
        return msg
