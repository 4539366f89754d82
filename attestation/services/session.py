# attestation/services/session.py
# one store per browser session: snapshot + confirmation gate + subscribers.
# destructive navigation goes through the gate first.
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, List, Union

from attestation.domain import machine
from attestation.domain.models import ConfirmationRequest, Screen, Snapshot
from attestation.services.catalog import TopicCatalog
from attestation.services.config import Settings
from attestation.services.gate import ConfirmationGate
from attestation.services.grader import PASS_THRESHOLD_PERCENT, ResultSummary, summarize

logger = logging.getLogger(__name__)

Listener = Callable[[Snapshot], None]

ABORT_TITLE = "Прервать тестирование?"
ABORT_MESSAGE = "Ваш текущий прогресс будет утерян."
RETRY_TITLE = "Повторить тест?"
TO_MODULES_TITLE = "Вернуться к модулям?"
RESULT_DISCARD_MESSAGE = "Текущий результат будет сброшен."
EXIT_MENU_TITLE = "Выйти в меню?"
EXIT_MENU_MESSAGE = "Результаты текущего теста будут сброшены."


class Intent(str, Enum):
    OPEN_TOPICS = "open_topics"
    START = "start"
    SELECT_OPTION = "select_option"
    SUBMIT = "submit"
    NEXT = "next"
    RESET_TO_TOPICS = "reset_to_topics"
    RETURN_TO_WELCOME = "return_to_welcome"
    REQUEST_ABORT = "request_abort"
    REQUEST_RETRY = "request_retry"
    REQUEST_TO_MODULES = "request_to_modules"
    REQUEST_HOME = "request_home"
    CONFIRM = "confirm"
    CANCEL = "cancel"


class QuizSession:
    def __init__(self, catalog: TopicCatalog, *, gate_results_exit: bool = True,
                 pass_threshold: int = PASS_THRESHOLD_PERCENT):
        self.catalog = catalog
        self.gate_results_exit = gate_results_exit
        self.pass_threshold = pass_threshold
        self._snapshot: Snapshot = machine.initial_snapshot()
        self._gate = ConfirmationGate()
        self._listeners: List[Listener] = []

    @classmethod
    def from_settings(cls, catalog: TopicCatalog, settings: Settings) -> "QuizSession":
        return cls(
            catalog,
            gate_results_exit=settings.gate_results_exit,
            pass_threshold=settings.pass_threshold,
        )

    # ---- read side ----

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def gate(self) -> ConfirmationGate:
        return self._gate

    @property
    def confirmation(self) -> ConfirmationRequest:
        return self._gate.request

    @property
    def screen(self) -> Screen:
        return self._snapshot.quiz.current_screen

    def results(self) -> ResultSummary:
        return summarize(self._snapshot, self.catalog, self.pass_threshold)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ---- write side ----

    def _apply(self, new: Snapshot) -> None:
        if new is self._snapshot:
            return
        self._snapshot = new
        for listener in list(self._listeners):
            listener(new)

    def dispatch(self, intent: Union[Intent, str], *args) -> None:
        handler = getattr(self, Intent(intent).value)
        handler(*args)

    def open_topics(self) -> None:
        self._apply(machine.open_topics(self._snapshot))

    def start(self, topic_index: int) -> None:
        self._apply(machine.start(self._snapshot, self.catalog, topic_index))

    def select_option(self, option_id: str) -> None:
        self._apply(machine.select_option(self._snapshot, self.catalog, option_id))

    def submit(self) -> None:
        self._apply(machine.submit(self._snapshot, self.catalog))

    def next(self) -> None:
        self._apply(machine.next_question(self._snapshot, self.catalog))

    def reset_to_topics(self) -> None:
        self._apply(machine.reset_to_topics(self._snapshot))

    def return_to_welcome(self) -> None:
        self._apply(machine.return_to_welcome(self._snapshot))

    def confirm(self) -> None:
        self._gate.confirm()

    def cancel(self) -> None:
        self._gate.cancel()

    # ---- gated navigation ----

    def request_abort(self) -> None:
        if self.screen != Screen.QUIZ:
            logger.debug("abort requested outside a quiz, ignored")
            return
        self._gate.request_confirmation(ABORT_TITLE, ABORT_MESSAGE, self.reset_to_topics)

    def request_retry(self) -> None:
        if self.screen != Screen.RESULTS:
            logger.debug("retry requested outside results, ignored")
            return
        topic_index = self._snapshot.quiz.active_topic_index
        self._gate.request_confirmation(
            RETRY_TITLE, RESULT_DISCARD_MESSAGE, lambda: self.start(topic_index)
        )

    def request_to_modules(self) -> None:
        if self.screen != Screen.RESULTS:
            logger.debug("back-to-modules requested outside results, ignored")
            return
        self._gate.request_confirmation(TO_MODULES_TITLE, RESULT_DISCARD_MESSAGE, self.reset_to_topics)

    def request_home(self) -> None:
        # header click
        screen = self.screen
        if screen == Screen.WELCOME:
            return
        if screen == Screen.QUIZ:
            self._gate.request_confirmation(ABORT_TITLE, ABORT_MESSAGE, self.return_to_welcome)
        elif screen == Screen.RESULTS and self.gate_results_exit:
            self._gate.request_confirmation(EXIT_MENU_TITLE, EXIT_MENU_MESSAGE, self.return_to_welcome)
        else:
            self.return_to_welcome()

