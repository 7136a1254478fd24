"""Data classes for the math adventure domain model."""
from dataclasses import dataclass
from enum import Enum


class ViewState(str, Enum):
    DASHBOARD = "dashboard"
    LESSON = "lesson"


class Category(str, Enum):
    CALCULATION = "calculation"
    GEOMETRY = "geometry"
    CONCEPT = "concept"
    LOGIC = "logic"


class Difficulty(Enum):
    EASY = "基础巩固"
    MEDIUM = "能力提升"
    HARD = "奥数挑战"

    @property
    def label(self) -> str:
        return self.value

    @property
    def description(self) -> str:
        return DIFFICULTY_DESCRIPTIONS[self]


DIFFICULTY_DESCRIPTIONS = {
    Difficulty.EASY: "课本基础题，直接计算或定义。",
    Difficulty.MEDIUM: "稍微复杂的应用题，需要两步思考。",
    Difficulty.HARD: "简单的逻辑推理或经典奥数题（如简单的鸡兔同笼变体，简单的周期问题）。",
}


class QuizState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    ANSWERED = "answered"
    ERROR = "error"


@dataclass(frozen=True)
class Topic:
    id: str
    title: str
    description: str
    visual_tag: str
    color_tag: str
    category: Category


@dataclass(frozen=True)
class QuizQuestion:
    id: int
    question: str
    options: tuple
    correct_answer: int
    explanation: str = ""


@dataclass(frozen=True)
class ChatMessage:
    role: str  # "user" or "model"
    text: str
    timestamp: int


@dataclass(frozen=True)
class AnswerResult:
    is_correct: bool
    selected: int
    correct_answer: int
    explanation: str
    streak: int


@dataclass
class UserStats:
    topics_completed: int = 0
    correct_answers: int = 0
    total_questions: int = 0
    stars: int = 0

    def record_answer(self, is_correct: bool) -> None:
        """One star per correct answer; counters never go down."""
        self.total_questions += 1
        if is_correct:
            self.correct_answers += 1
            self.stars += 1
