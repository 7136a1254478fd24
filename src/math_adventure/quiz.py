"""Quiz engine: fetches batches of AI-generated questions and scores answers."""
import logging
from typing import Callable, Optional

from math_adventure.gemini import QUIZ_BATCH_SIZE, ProviderError
from math_adventure.models import AnswerResult, Difficulty, QuizQuestion, QuizState, Topic
from math_adventure.schemas import parse_quiz_batch

log = logging.getLogger(__name__)


def fetch_quiz_batch(provider, topic_title: str, difficulty: Difficulty,
                     batch_size: int = QUIZ_BATCH_SIZE) -> list[QuizQuestion]:
    """Ask the provider for a batch. Any failure collapses to an empty list."""
    try:
        payload = provider.quiz(topic_title, difficulty)
        return parse_quiz_batch(payload, batch_size)
    except ProviderError as e:
        log.warning("quiz fetch failed for %r (%s): %s", topic_title, difficulty.label, e)
    except ValueError as e:
        log.warning("malformed quiz for %r (%s): %s", topic_title, difficulty.label, e)
    return []


class QuizEngine:
    """Walks the learner through one batch at a time.

    ``on_answer`` receives ``is_correct`` once per scored answer; the session
    passes its stats recorder here.
    """

    def __init__(self, provider, topic: Topic,
                 on_answer: Optional[Callable[[bool], None]] = None,
                 difficulty: Difficulty = Difficulty.EASY):
        self.provider = provider
        self.topic = topic
        self.on_answer = on_answer
        self.difficulty = difficulty
        self.questions: list[QuizQuestion] = []
        self.index = 0
        self.selected: Optional[int] = None
        self.streak = 0
        self.state = QuizState.LOADING
        self.discarded = False
        self._ticket = 0

    # --- loading ---

    def begin_load(self) -> int:
        """Reset progress and enter LOADING. Returns the ticket for this load."""
        self._ticket += 1
        self.questions = []
        self.index = 0
        self.selected = None
        self.state = QuizState.LOADING
        return self._ticket

    def finish_load(self, ticket: int, questions: list[QuizQuestion]) -> bool:
        """Apply a fetched batch unless a newer load or a discard superseded it."""
        if self.discarded or ticket != self._ticket:
            log.debug("dropping stale quiz batch (ticket %d, current %d)", ticket, self._ticket)
            return False
        self.questions = list(questions)
        self.state = QuizState.READY if self.questions else QuizState.ERROR
        return True

    def load_batch(self) -> list[QuizQuestion]:
        ticket = self.begin_load()
        questions = fetch_quiz_batch(self.provider, self.topic.title, self.difficulty)
        self.finish_load(ticket, questions)
        return questions

    def retry(self) -> Optional[list[QuizQuestion]]:
        if self.state != QuizState.ERROR:
            return None
        return self.load_batch()

    def discard(self) -> None:
        self.discarded = True
        self.questions = []

    # --- progression ---

    @property
    def current(self) -> Optional[QuizQuestion]:
        if self.state in (QuizState.READY, QuizState.ANSWERED) and self.questions:
            return self.questions[self.index]
        return None

    @property
    def progress(self) -> tuple[int, int]:
        return self.index + 1, len(self.questions)

    @property
    def is_last_question(self) -> bool:
        return self.index >= len(self.questions) - 1

    def answer(self, index: int) -> Optional[AnswerResult]:
        question = self.current
        if self.state != QuizState.READY or question is None:
            return None
        if not 0 <= index < len(question.options):
            return None
        is_correct = index == question.correct_answer
        self.selected = index
        self.state = QuizState.ANSWERED
        self.streak = self.streak + 1 if is_correct else 0
        if self.on_answer is not None:
            self.on_answer(is_correct)
        return AnswerResult(
            is_correct=is_correct,
            selected=index,
            correct_answer=question.correct_answer,
            explanation=question.explanation,
            streak=self.streak,
        )

    def advance(self) -> None:
        if self.state != QuizState.ANSWERED:
            return
        if not self.is_last_question:
            self.index += 1
            self.selected = None
            self.state = QuizState.READY
        else:
            # Batch finished; always fetch new questions rather than replaying.
            self.load_batch()

    def set_difficulty(self, difficulty: Difficulty) -> None:
        if difficulty == self.difficulty:
            return
        self.difficulty = difficulty
        self.load_batch()
