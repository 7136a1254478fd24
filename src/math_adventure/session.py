"""Session state: current view, selected topic, and cumulative stats."""
import logging
from dataclasses import dataclass
from typing import Optional

from math_adventure.chat import ChatSession, fetch_explanation
from math_adventure.models import ChatMessage, Difficulty, Topic, UserStats, ViewState
from math_adventure.quiz import QuizEngine

log = logging.getLogger(__name__)


@dataclass
class LessonState:
    """Everything that lives only while a topic is open."""
    generation: int
    topic: Topic
    chat: ChatSession
    quiz: QuizEngine


class Session:
    def __init__(self, provider, stats: Optional[UserStats] = None):
        self.provider = provider
        self.stats = stats or UserStats()
        self.view_state = ViewState.DASHBOARD
        self.current_topic: Optional[Topic] = None
        self.lesson: Optional[LessonState] = None
        self._generation = 0

    def record_answer(self, is_correct: bool) -> None:
        self.stats.record_answer(is_correct)

    def open_lesson(self, topic: Topic) -> LessonState:
        """Switch to the lesson view with fresh, empty chat and quiz state."""
        if self.lesson is not None:
            self.lesson.quiz.discard()
        self._generation += 1
        self.current_topic = topic
        self.view_state = ViewState.LESSON
        self.lesson = LessonState(
            generation=self._generation,
            topic=topic,
            chat=ChatSession(self.provider),
            quiz=QuizEngine(self.provider, topic, on_answer=self.record_answer,
                            difficulty=Difficulty.EASY),
        )
        return self.lesson

    def deliver_explanation(self, generation: int, text: str) -> bool:
        """Seed the chat, unless the learner already left that lesson."""
        if self.lesson is None or self.lesson.generation != generation:
            log.debug("dropping stale explanation for generation %d", generation)
            return False
        self.lesson.chat.seed(text)
        return True

    def select_topic(self, topic: Topic) -> LessonState:
        lesson = self.open_lesson(topic)
        self.deliver_explanation(lesson.generation, fetch_explanation(self.provider, topic.title))
        if self.lesson is lesson:
            lesson.quiz.load_batch()
        return lesson

    def return_to_dashboard(self) -> None:
        if self.lesson is not None:
            self.lesson.quiz.discard()
        self.lesson = None
        self.current_topic = None
        self.view_state = ViewState.DASHBOARD

    def ask(self, text: str) -> Optional[ChatMessage]:
        if self.lesson is None:
            return None
        return self.lesson.chat.send(text)
