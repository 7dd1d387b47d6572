from __future__ import annotations

from typing import Dict, Iterator, Tuple


class AnswerSet:
    """Mutable record of the answers given during one survey session.

    Values are stored per question identity and replaced wholesale on every
    ``set_answer`` call. No validation happens here; callers check answers
    against the question before writing them.
    """

    def __init__(self, survey_id: str) -> None:
        self._survey_id = survey_id
        self._answers: Dict[int, Tuple[str, ...]] = {}

    @property
    def survey_id(self) -> str:
        return self._survey_id

    def set_answer(self, question_index: int, *values: str) -> None:
        """Replace any prior values recorded for ``question_index``."""

        if not values:
            raise ValueError("set_answer requires at least one value")
        self._answers[question_index] = tuple(values)

    def get_answer(self, question_index: int) -> Tuple[str, ...]:
        """Return the recorded values, or an empty tuple when unanswered."""

        return self._answers.get(question_index, ())

    def is_answered(self, question_index: int) -> bool:
        """Return True when at least one non-empty value is recorded."""

        return any(value.strip() for value in self.get_answer(question_index))

    def answered_count(self) -> int:
        return sum(1 for index in self._answers if self.is_answered(index))

    def items(self) -> Iterator[Tuple[int, Tuple[str, ...]]]:
        return iter(sorted(self._answers.items()))

    def __len__(self) -> int:
        return len(self._answers)

    def __contains__(self, question_index: object) -> bool:
        return question_index in self._answers
