from typing import Dict, FrozenSet, Iterable, List, Optional

from app.schemas.Tests import Question


class AnswerCollector:
    """
    Selections made by a student during an attempt, keyed by question id.

    Correctness is never looked at here; grading happens in the Scorer.
    """

    def __init__(self, questions: List[Question], selections: Optional[Dict[str, Iterable[str]]] = None):
        self._questions = {str(question.id): question for question in questions}
        self._selections: Dict[str, FrozenSet[str]] = {
            question_id: frozenset() for question_id in self._questions
        }
        for question_id, option_ids in (selections or {}).items():
            if question_id in self._questions:
                self._selections[question_id] = frozenset(option_ids)

    def _question(self, question_id: str) -> Question:
        question = self._questions.get(question_id)
        if question is None:
            raise ValueError(f"Question {question_id} is not part of this test")
        return question

    def select(self, question_id: str, option_id: str) -> FrozenSet[str]:
        question = self._question(question_id)
        if option_id not in question.option_ids:
            raise ValueError(f"Option {option_id} does not belong to question {question_id}")

        current = self._selections[question_id]
        if question.is_single_correct:
            updated = frozenset([option_id])
        elif option_id in current:
            updated = current - {option_id}
        else:
            updated = current | {option_id}

        self._selections[question_id] = updated
        return updated

    def selected(self, question_id: str) -> FrozenSet[str]:
        self._question(question_id)
        return self._selections[question_id]

    def snapshot(self) -> Dict[str, FrozenSet[str]]:
        return dict(self._selections)

    def answered_count(self) -> int:
        return sum(1 for option_ids in self._selections.values() if option_ids)
