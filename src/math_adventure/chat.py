"""Tutor conversation: an explanation seed followed by free-form questions."""
import logging
import time
from typing import Callable, Optional

from math_adventure.gemini import ProviderError
from math_adventure.models import ChatMessage

log = logging.getLogger(__name__)

EXPLANATION_FALLBACK = "哎呀，老师的网络稍微有点卡，请再问一次吧！🤖"
CHAT_FALLBACK = "老师正在思考中，请稍等一下... 🧠"
EMPTY_REPLY_FALLBACK = "我好像走神了，能再说一遍吗？"


def now_ms() -> int:
    return int(time.time() * 1000)


def fetch_explanation(provider, topic_title: str, user_query: str = "") -> str:
    try:
        return provider.explain(topic_title, user_query)
    except ProviderError as e:
        log.warning("explanation failed for %r: %s", topic_title, e)
        return EXPLANATION_FALLBACK


class ChatSession:
    def __init__(self, provider, clock: Callable[[], int] = now_ms):
        self.provider = provider
        self.clock = clock
        self.messages: list[ChatMessage] = []
        self.pending = False

    def _append(self, role: str, text: str) -> ChatMessage:
        ts = self.clock()
        if self.messages:
            ts = max(ts, self.messages[-1].timestamp)
        msg = ChatMessage(role=role, text=text, timestamp=ts)
        self.messages.append(msg)
        return msg

    def seed(self, explanation: str) -> None:
        self.messages = []
        self._append("model", explanation)

    def history(self) -> list[tuple[str, str]]:
        return [(m.role, m.text) for m in self.messages]

    def send(self, text: str) -> Optional[ChatMessage]:
        """Send a learner message and append the tutor's reply.

        Ignored (returns None) for blank text or while a previous send is pending.
        """
        if not text or not text.strip() or self.pending:
            return None
        prior = self.history()
        self._append("user", text)
        self.pending = True
        try:
            reply = self.provider.chat_turn(prior, text)
        except ProviderError as e:
            log.warning("chat turn failed: %s", e)
            reply = CHAT_FALLBACK
        finally:
            self.pending = False
        return self._append("model", reply or EMPTY_REPLY_FALLBACK)
