import math
from dataclasses import dataclass

from attestation.domain.machine import current_topic
from attestation.domain.models import Screen, Snapshot
from attestation.services.catalog import TopicCatalog

PASS_THRESHOLD_PERCENT = 80


@dataclass(frozen=True)
class ResultSummary:
    topic_title: str
    score: int
    total: int
    percentage: int
    passed: bool


def percentage(score: int, total: int) -> int:
    if total <= 0:
        raise ValueError("a topic always has at least one question")
    # half-up, not banker's rounding: 2.5 -> 3
    return int(math.floor(100 * score / total + 0.5))


def passed(pct: int, threshold: int = PASS_THRESHOLD_PERCENT) -> bool:
    return pct >= threshold


def summarize(snapshot: Snapshot, catalog: TopicCatalog,
              threshold: int = PASS_THRESHOLD_PERCENT) -> ResultSummary:
    topic = current_topic(snapshot, catalog)
    if topic is None or snapshot.quiz.current_screen != Screen.RESULTS:
        raise ValueError("results are only available once an attempt is finished")
    total = len(topic.questions)
    pct = percentage(snapshot.quiz.score, total)
    return ResultSummary(
        topic_title=topic.title,
        score=snapshot.quiz.score,
        total=total,
        percentage=pct,
        passed=passed(pct, threshold),
    )
