import pytest

from math_adventure.catalog import get_topic
from math_adventure.gemini import ProviderError
from math_adventure.session import Session


def make_batch(tag="q", correct=(0, 1, 2)):
    """A valid provider payload of len(correct) questions."""
    return [
        {
            "id": i + 1,
            "question": f"{tag}{i + 1}: 3 + 4 × 2 = ?",
            "options": ["11", "14", "10", "9"],
            "correctAnswer": c,
            "explanation": "先乘后加。",
        }
        for i, c in enumerate(correct)
    ]


class FakeProvider:
    """Scripted content provider.

    Each queue entry is returned in turn; an Exception instance is raised instead.
    When a queue runs dry the default is used.
    """

    def __init__(self, explanations=None, quizzes=None, replies=None):
        self.explanations = list(explanations or [])
        self.quizzes = list(quizzes or [])
        self.replies = list(replies or [])
        self.explain_calls = []
        self.quiz_calls = []
        self.chat_calls = []

    @staticmethod
    def _next(queue, default):
        item = queue.pop(0) if queue else default
        if isinstance(item, Exception):
            raise item
        return item

    def explain(self, topic_title, user_query=""):
        self.explain_calls.append((topic_title, user_query))
        return self._next(self.explanations, f"讲解：{topic_title}")

    def quiz(self, topic_title, difficulty):
        self.quiz_calls.append((topic_title, difficulty))
        return self._next(self.quizzes, make_batch())

    def chat_turn(self, history, message):
        self.chat_calls.append((list(history), message))
        return self._next(self.replies, f"回答：{message}")


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def topic():
    return get_topic("mixed-ops")


@pytest.fixture
def session(provider):
    return Session(provider)


@pytest.fixture
def provider_error():
    return ProviderError("boom")
