"""Shared fixtures: a small in-memory catalog independent of the bundled data."""

import pytest

from attestation.domain.models import Option, Question, Topic
from attestation.services.catalog import TopicCatalog


def make_question(qid, correct="A", ids=("A", "B", "C", "D")):
    return Question(
        id=qid,
        text=f"Question {qid}?",
        options=tuple(Option(id=i, text=f"answer {i}") for i in ids),
        correct_option_id=correct,
    )


def make_topic(tid, n, correct="A"):
    return Topic(
        id=tid,
        title=f"Topic {tid}",
        description=f"{n} questions",
        questions=tuple(make_question(i + 1, correct) for i in range(n)),
    )


@pytest.fixture
def catalog():
    # index 0: five questions, index 1: three questions, index 2: a single question
    return TopicCatalog([
        make_topic("five", 5),
        make_topic("three", 3, correct="B"),
        make_topic("one", 1, correct="C"),
    ])
