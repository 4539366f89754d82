# attestation/domain/machine.py
# pure screen-flow transitions: Snapshot in, Snapshot out, nothing mutated.
# intents that don't apply to the current state return the same snapshot.
from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from typing import TYPE_CHECKING, Optional, Tuple

from attestation.domain.models import (
    Interaction,
    Question,
    QuizState,
    Screen,
    Snapshot,
    Topic,
    frozen_answers,
)

if TYPE_CHECKING:
    from attestation.services.catalog import TopicCatalog

logger = logging.getLogger(__name__)


class OptionStatus(str, Enum):
    IDLE = "idle"
    SELECTED = "selected"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    DIMMED = "dimmed"


def _moved(before: Snapshot, after: Snapshot, intent: str) -> Snapshot:
    logger.info(
        "FSM: %s --[%s]--> %s",
        before.quiz.current_screen.value, intent, after.quiz.current_screen.value,
    )
    return after


def _ignored(snapshot: Snapshot, intent: str, reason: str) -> Snapshot:
    logger.debug("ignored %s on %s: %s", intent, snapshot.quiz.current_screen.value, reason)
    return snapshot


def initial_snapshot() -> Snapshot:
    return Snapshot()


def _fresh(screen: Screen, topic_index: Optional[int] = None) -> Snapshot:
    return Snapshot(
        quiz=QuizState(
            current_screen=screen,
            active_topic_index=topic_index,
            current_question_index=0,
            answers=frozen_answers(),
            score=0,
            is_finished=False,
        ),
        interaction=Interaction(),
    )


# -------------------------------
# Transitions
# -------------------------------
def open_topics(snapshot: Snapshot) -> Snapshot:
    # welcome "start" button
    return _moved(snapshot, _fresh(Screen.TOPICS), "open_topics")


def start(snapshot: Snapshot, catalog: "TopicCatalog", topic_index: int) -> Snapshot:
    # indices come from enumerating the catalog; a bad one is a caller bug
    if isinstance(topic_index, bool) or not isinstance(topic_index, int):
        raise TypeError(f"topic index must be int, got {type(topic_index).__name__}")
    if not 0 <= topic_index < catalog.count:
        raise IndexError(f"topic index {topic_index} out of range (0..{catalog.count - 1})")
    return _moved(snapshot, _fresh(Screen.QUIZ, topic_index), f"start:{topic_index}")


def select_option(snapshot: Snapshot, catalog: "TopicCatalog", option_id: str) -> Snapshot:
    if snapshot.quiz.current_screen != Screen.QUIZ:
        return _ignored(snapshot, "select_option", "no active quiz")
    if snapshot.interaction.show_feedback:
        return _ignored(snapshot, "select_option", "answer already revealed")
    question = current_question(snapshot, catalog)
    if question is None or option_id not in question.option_ids():
        return _ignored(snapshot, "select_option", f"unknown option {option_id!r}")
    if snapshot.interaction.selected_option == option_id:
        return snapshot
    logger.debug("selected option %s", option_id)
    return replace(snapshot, interaction=replace(snapshot.interaction, selected_option=option_id))


def submit(snapshot: Snapshot, catalog: "TopicCatalog") -> Snapshot:
    interaction = snapshot.interaction
    if snapshot.quiz.current_screen != Screen.QUIZ:
        return _ignored(snapshot, "submit", "no active quiz")
    if interaction.show_feedback:
        return _ignored(snapshot, "submit", "answer already revealed")
    if interaction.selected_option is None:
        return _ignored(snapshot, "submit", "no option selected")
    question = current_question(snapshot, catalog)
    if question is None:
        return _ignored(snapshot, "submit", "no active question")

    chosen = interaction.selected_option
    ok = question.is_correct(chosen)
    answers = dict(snapshot.quiz.answers)
    answers[question.id] = chosen
    quiz = replace(
        snapshot.quiz,
        score=snapshot.quiz.score + (1 if ok else 0),
        answers=frozen_answers(answers),
    )
    logger.info("question %s answered %s (%s)", question.id, chosen, "correct" if ok else "wrong")
    return Snapshot(quiz=quiz, interaction=replace(interaction, show_feedback=True))


def next_question(snapshot: Snapshot, catalog: "TopicCatalog") -> Snapshot:
    if not snapshot.interaction.show_feedback:
        return _ignored(snapshot, "next", "feedback not shown yet")
    topic = current_topic(snapshot, catalog)
    if topic is None or snapshot.quiz.current_screen != Screen.QUIZ:
        return _ignored(snapshot, "next", "no active quiz")

    quiz = snapshot.quiz
    if quiz.current_question_index < len(topic.questions) - 1:
        quiz = replace(quiz, current_question_index=quiz.current_question_index + 1)
    else:
        quiz = replace(quiz, current_screen=Screen.RESULTS, is_finished=True)
    return _moved(snapshot, Snapshot(quiz=quiz, interaction=Interaction()), "next")


def reset_to_topics(snapshot: Snapshot) -> Snapshot:
    return _moved(snapshot, _fresh(Screen.TOPICS), "reset_to_topics")


def return_to_welcome(snapshot: Snapshot) -> Snapshot:
    # only the screen changes; the rest is stale until the next start/open_topics
    quiz = replace(snapshot.quiz, current_screen=Screen.WELCOME)
    return _moved(snapshot, replace(snapshot, quiz=quiz), "return_to_welcome")


# -------------------------------
# Projections for the views
# -------------------------------
def current_topic(snapshot: Snapshot, catalog: "TopicCatalog") -> Optional[Topic]:
    index = snapshot.quiz.active_topic_index
    if index is None:
        return None
    return catalog.get(index)


def current_question(snapshot: Snapshot, catalog: "TopicCatalog") -> Optional[Question]:
    topic = current_topic(snapshot, catalog)
    if topic is None:
        return None
    return topic.questions[snapshot.quiz.current_question_index]


def is_last_question(snapshot: Snapshot, catalog: "TopicCatalog") -> bool:
    topic = current_topic(snapshot, catalog)
    if topic is None:
        return False
    return snapshot.quiz.current_question_index == len(topic.questions) - 1


def progress(snapshot: Snapshot, catalog: "TopicCatalog") -> Tuple[int, int, float]:
    # (1-based position, total questions, percent of the bar filled)
    topic = current_topic(snapshot, catalog)
    if topic is None:
        return 0, 0, 0.0
    total = len(topic.questions)
    position = snapshot.quiz.current_question_index + 1
    return position, total, position / total * 100


def option_status(snapshot: Snapshot, catalog: "TopicCatalog", option_id: str) -> OptionStatus:
    interaction = snapshot.interaction
    if not interaction.show_feedback:
        if interaction.selected_option == option_id:
            return OptionStatus.SELECTED
        return OptionStatus.IDLE
    question = current_question(snapshot, catalog)
    if question is not None and option_id == question.correct_option_id:
        return OptionStatus.CORRECT
    if option_id == interaction.selected_option:
        return OptionStatus.INCORRECT
    return OptionStatus.DIMMED
