from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Tuple


def frozen_answers(answers: Optional[Mapping[int, str]] = None) -> Mapping[int, str]:
    return MappingProxyType(dict(answers or {}))


@dataclass(frozen=True)
class Option:
    id: str               # short code shown on the button
    text: str


@dataclass(frozen=True)
class Question:
    id: int               # unique within a topic
    text: str
    options: Tuple[Option, ...]
    correct_option_id: str
    explanation: Optional[str] = None

    def option_ids(self) -> Tuple[str, ...]:
        return tuple(o.id for o in self.options)

    def is_correct(self, option_id: Optional[str]) -> bool:
        return option_id is not None and option_id == self.correct_option_id


@dataclass(frozen=True)
class Topic:
    id: str
    title: str
    description: str
    questions: Tuple[Question, ...]


class Screen(str, Enum):
    WELCOME = "welcome"
    TOPICS = "topics"
    QUIZ = "quiz"
    RESULTS = "results"


@dataclass(frozen=True)
class QuizState:
    current_screen: Screen = Screen.WELCOME
    active_topic_index: Optional[int] = None
    current_question_index: int = 0
    answers: Mapping[int, str] = field(default_factory=frozen_answers)  # question.id -> option.id
    score: int = 0
    is_finished: bool = False


@dataclass(frozen=True)
class Interaction:
    # scoped to the current question only
    selected_option: Optional[str] = None
    show_feedback: bool = False


@dataclass(frozen=True)
class Snapshot:
    quiz: QuizState = field(default_factory=QuizState)
    interaction: Interaction = field(default_factory=Interaction)


@dataclass(frozen=True)
class ConfirmationRequest:
    is_open: bool = False
    title: str = ""
    message: str = ""
    pending_action: Optional[Callable[[], None]] = None


CLOSED = ConfirmationRequest()
