from typing import Dict, FrozenSet, Iterable, List

from app.schemas.Attempts import GradedAnswer, ScoreSheet
from app.schemas.Tests import Question

PASS_PERCENTAGE = 60.0


def percentage(score: int, total_marks: int) -> float:
    if not total_marks:
        return 0.0
    return round(score / total_marks * 100, 1)


def format_percentage(score: int, total_marks: int) -> str:
    """score=7, total_marks=10 -> "70.0%"."""
    if not total_marks:
        return "0.0%"
    return f"{score / total_marks * 100:.1f}%"


def has_passed(score: int, total_marks: int) -> bool:
    return percentage(score, total_marks) >= PASS_PERCENTAGE


class Scorer:
    """All-or-nothing grading: a question earns its marks only for an exact match."""

    @staticmethod
    def grade_question(question: Question, selected: Iterable[str]) -> GradedAnswer:
        selected_set = frozenset(selected or ())
        is_correct = selected_set == question.correct_answer_set
        return GradedAnswer(
            questionId=str(question.id),
            selectedAnswers=sorted(selected_set),
            isCorrect=is_correct,
            marksObtained=question.marks if is_correct else 0,
        )

    def score_attempt(self, questions: List[Question], selections: Dict[str, FrozenSet[str]]) -> ScoreSheet:
        answers = [
            self.grade_question(question, selections.get(str(question.id), frozenset()))
            for question in questions
        ]
        score = sum(answer.marksObtained for answer in answers)
        total_marks = sum(question.marks for question in questions)
        return ScoreSheet(
            score=score,
            totalMarks=total_marks,
            percentage=percentage(score, total_marks),
            answers=answers,
        )
