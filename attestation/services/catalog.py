# attestation/services/catalog.py
import json
import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from attestation.domain.models import Option, Question, Topic
from attestation.services.config import Settings, get_settings

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Bundled topic/question data is malformed."""


class TopicCatalog:
    """Read-only, ordered topic list. Question order inside a topic is the quiz order."""

    def __init__(self, topics: Sequence[Topic]):
        self._topics: Tuple[Topic, ...] = tuple(topics)

    @property
    def count(self) -> int:
        return len(self._topics)

    def get(self, index: int) -> Topic:
        if not 0 <= index < len(self._topics):
            raise IndexError(f"topic index {index} out of range (0..{len(self._topics) - 1})")
        return self._topics[index]

    def __len__(self) -> int:
        return len(self._topics)

    def __iter__(self) -> Iterator[Topic]:
        return iter(self._topics)


# ---- internal helpers ----

def clean_line(line: str) -> str:
    """Trim whitespace and a trailing ``},`` comma left over from hand-editing."""
    stripped = line.strip()
    if stripped.endswith("},"):
        stripped = stripped[:-1]
    return stripped


def _read_jsonl(path: Path) -> List[Tuple[int, dict]]:
    if not path.exists():
        raise FileNotFoundError(path)
    rows = []
    with path.open("r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, 1):
            line = clean_line(line)
            if not line:
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError as e:
                raise CatalogError(f"{path}:{lineno}: invalid JSON ({e.msg})") from e
            if not isinstance(obj, dict):
                raise CatalogError(f"{path}:{lineno}: expected an object")
            rows.append((lineno, obj))
    return rows


def _require(obj: dict, key: str, where: str):
    value = obj.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise CatalogError(f"{where}: missing '{key}'")
    return value


def _parse_question(obj: dict, where: str) -> Question:
    qid = _require(obj, "id", where)
    if isinstance(qid, bool) or not isinstance(qid, int):
        raise CatalogError(f"{where}: question id must be an integer")

    raw_options = obj.get("options") or []
    if not raw_options:
        raise CatalogError(f"{where}: question {qid} has no options")
    options = []
    seen = set()
    for o in raw_options:
        if not isinstance(o, dict):
            raise CatalogError(f"{where}: question {qid} has a malformed option")
        oid = str(_require(o, "id", where)).strip()
        if oid in seen:
            raise CatalogError(f"{where}: question {qid} repeats option id {oid!r}")
        seen.add(oid)
        options.append(Option(id=oid, text=str(_require(o, "text", where))))

    correct = str(_require(obj, "correct_option_id", where)).strip()
    if correct not in seen:
        raise CatalogError(f"{where}: question {qid} correct_option_id {correct!r} is not an option")

    return Question(
        id=qid,
        text=str(_require(obj, "text", where)),
        options=tuple(options),
        correct_option_id=correct,
        explanation=obj.get("explanation") or None,
    )


# ---- public API ----

def load_catalog(topics_path: Path, questions_path: Path) -> TopicCatalog:
    topics_path, questions_path = Path(topics_path), Path(questions_path)

    order: List[str] = []
    meta: Dict[str, dict] = {}
    for lineno, obj in _read_jsonl(topics_path):
        where = f"{topics_path}:{lineno}"
        tid = str(_require(obj, "id", where))
        if tid in meta:
            raise CatalogError(f"{where}: duplicate topic id {tid!r}")
        meta[tid] = {
            "title": str(_require(obj, "title", where)),
            "description": str(obj.get("description") or ""),
        }
        order.append(tid)

    grouped: Dict[str, List[Question]] = {tid: [] for tid in order}
    for lineno, obj in _read_jsonl(questions_path):
        where = f"{questions_path}:{lineno}"
        tid = str(_require(obj, "topic_id", where))
        if tid not in grouped:
            raise CatalogError(f"{where}: unknown topic_id {tid!r}")
        q = _parse_question(obj, where)
        if any(existing.id == q.id for existing in grouped[tid]):
            raise CatalogError(f"{where}: duplicate question id {q.id} in topic {tid!r}")
        grouped[tid].append(q)

    topics = []
    for tid in order:
        if not grouped[tid]:
            raise CatalogError(f"{topics_path}: topic {tid!r} has no questions")
        topics.append(Topic(id=tid, questions=tuple(grouped[tid]), **meta[tid]))

    logger.info("loaded %d topics / %d questions", len(topics), sum(len(t.questions) for t in topics))
    return TopicCatalog(topics)


def default_catalog(settings: Optional[Settings] = None) -> TopicCatalog:
    settings = settings or get_settings()
    return load_catalog(settings.topics_path, settings.questions_path)
