from datetime import datetime
from typing import Optional, Tuple

from app.helpers.AnswerCollector import AnswerCollector
from app.helpers.AttemptTimer import AttemptTimer
from app.helpers.Scorer import Scorer, format_percentage, has_passed
from app.models.AttemptAnswers import AttemptAnswerModel
from app.models.Attempts import AttemptModel
from app.models.Questions import QuestionModel
from app.models.Tests import TestModel
from app.schemas.Attempts import Attempt, AttemptStatus, OptionSelection
from app.schemas.Session import SessionContext
from app.schemas.Tests import Test


class AttemptService:
    """
    Timed attempts: start, answer, submit and review.

    An attempt leaves `in_progress` through `_finish` only. The status guard
    lives in `AttemptModel.finish_attempt`, so a manual submit and the
    expiry path can race and exactly one of them is recorded.
    """

    def __init__(self):
        self.attempt_model = AttemptModel()
        self.answer_model = AttemptAnswerModel()
        self.test_model = TestModel()
        self.question_model = QuestionModel()
        self.scorer = Scorer()

    def _load_attempt(
        self, session: SessionContext, attempt_id: str, allow_admin: bool = False
    ) -> Tuple[Optional[Attempt], Optional[Test], Optional[str]]:
        attempt = self.attempt_model.get_attempt(attempt_id)
        if not attempt:
            return None, None, "Attempt not found"
        if attempt.userId != session.userId and not (allow_admin and session.is_admin):
            return None, None, "Attempt not found"
        test = self.test_model.get_test(attempt.testId)
        if not test:
            return None, None, "Test not found"
        return attempt, test, None

    def _finish(
        self, attempt: Attempt, test: Test, status: AttemptStatus, now: Optional[datetime] = None
    ) -> Tuple[Attempt, bool]:
        """
        Grade the attempt and record the terminal status.
        Returns the stored attempt and whether it had already been finished.

        Graded answer records are written first and the status flips last, so
        a failure on the way leaves the attempt in progress and a retry
        grades it again.
        """
        now = now or datetime.utcnow()
        stored = self.attempt_model.get_attempt(attempt.id)
        if stored and stored.is_terminal:
            return stored, True

        questions = self.question_model.get_questions(test.id)
        collector = AnswerCollector(questions, self.answer_model.get_selections(attempt.id))
        sheet = self.scorer.score_attempt(questions, collector.snapshot())

        timer = AttemptTimer(attempt.durationMinutes, attempt.startedAt)
        submitted_at = timer.deadline if status == AttemptStatus.AUTO_SUBMITTED else now
        self.answer_model.save_grades(attempt.id, sheet.answers)
        try:
            finished = self.attempt_model.finish_attempt(attempt.id, {
                "status": status.value,
                "score": sheet.score,
                "totalMarks": sheet.totalMarks,
                "percentage": sheet.percentage,
                "submittedAt": submitted_at,
                "timeTakenSeconds": timer.elapsed_seconds(submitted_at),
            })
        except Exception:
            self.answer_model.release_grades(attempt.id)
            raise
        if finished is None:
            return self.attempt_model.get_attempt(attempt.id), True

        print(
            f"[Attempts] attempt={attempt.id} status={status.value} "
            f"score={sheet.score}/{sheet.totalMarks}"
        )
        return finished, False

    def _expire_if_due(self, attempt: Attempt, test: Test, now: Optional[datetime] = None) -> Attempt:
        if attempt.is_terminal:
            return attempt
        outcome = {}

        def auto_submit():
            outcome["attempt"], _ = self._finish(attempt, test, AttemptStatus.AUTO_SUBMITTED, now)

        AttemptTimer(attempt.durationMinutes, attempt.startedAt, on_expire=auto_submit).check(now)
        return outcome.get("attempt", attempt)

    def _result(self, attempt: Attempt, test: Test, already_submitted: bool = False) -> dict:
        return {
            "attemptId": attempt.id,
            "testId": attempt.testId,
            "testTitle": test.title,
            "status": attempt.status.value,
            "score": attempt.score,
            "totalMarks": attempt.totalMarks,
            "percentage": format_percentage(attempt.score, attempt.totalMarks),
            "passed": has_passed(attempt.score, attempt.totalMarks),
            "submittedAt": attempt.submittedAt,
            "timeTakenSeconds": attempt.timeTakenSeconds,
            "alreadySubmitted": already_submitted,
        }

    def _attempt_view(self, attempt: Attempt, test: Test, now: Optional[datetime] = None) -> dict:
        questions = self.question_model.get_questions(test.id)
        collector = AnswerCollector(questions, self.answer_model.get_selections(attempt.id))
        timer = AttemptTimer(attempt.durationMinutes, attempt.startedAt)
        return {
            "attempt": attempt.model_dump(),
            "test": {
                "id": test.id,
                "title": test.title,
                "description": test.description,
                "durationMinutes": attempt.durationMinutes,
                "totalMarks": test.totalMarks,
            },
            "questions": [question.for_student() for question in questions],
            "selections": {
                question_id: sorted(option_ids)
                for question_id, option_ids in collector.snapshot().items()
            },
            "answeredCount": collector.answered_count(),
            "remainingSeconds": 0 if attempt.is_terminal else timer.remaining_seconds(now),
            "deadline": timer.deadline,
        }

    def start_attempt(self, session: SessionContext, test_id: str) -> dict:
        try:
            test = self.test_model.get_test(test_id)
            if not test or not test.isActive:
                return {"success": False, "data": None, "error": "Test is not available"}

            filters = {"userId": session.userId, "testId": test.id}
            existing = self.attempt_model.find_attempt(
                {**filters, "status": AttemptStatus.IN_PROGRESS.value}
            )
            if existing:
                existing = self._expire_if_due(existing, test)
                if not existing.is_terminal:
                    return {"success": True, "data": self._attempt_view(existing, test)}

            if self.attempt_model.count_attempts(
                {**filters, "status": {"$ne": AttemptStatus.IN_PROGRESS.value}}
            ):
                return {"success": False, "data": None, "error": "You have already completed this test"}

            attempt_id = self.attempt_model.create_attempt({
                "testId": test.id,
                "userId": session.userId,
                "startedAt": datetime.utcnow(),
                # fixed at start; later edits to the test do not move the deadline
                "durationMinutes": test.durationMinutes,
                "score": 0,
                "totalMarks": test.totalMarks,
            })
            attempt = self.attempt_model.get_attempt(str(attempt_id))
            print(f"[Attempts] started attempt={attempt_id} test={test.id} user={session.userId}")
            return {"success": True, "data": self._attempt_view(attempt, test)}
        except Exception as e:
            print(f"[Attempts] start failed for test={test_id}: {e}")
            return {"success": False, "data": None, "error": "Failed to start test"}

    def get_attempt(self, session: SessionContext, attempt_id: str) -> dict:
        try:
            attempt, test, error = self._load_attempt(session, attempt_id)
            if error:
                return {"success": False, "data": None, "error": error}
            attempt = self._expire_if_due(attempt, test)
            return {"success": True, "data": self._attempt_view(attempt, test)}
        except Exception as e:
            print(f"[Attempts] load failed for attempt={attempt_id}: {e}")
            return {"success": False, "data": None, "error": "Failed to load attempt"}

    def select_option(self, session: SessionContext, attempt_id: str, selection: OptionSelection) -> dict:
        try:
            attempt, test, error = self._load_attempt(session, attempt_id)
            if error:
                return {"success": False, "data": None, "error": error}
            attempt = self._expire_if_due(attempt, test)
            if attempt.is_terminal:
                return {"success": False, "data": None, "error": "This attempt has already been submitted"}

            questions = self.question_model.get_questions(test.id)
            collector = AnswerCollector(questions, self.answer_model.get_selections(attempt.id))
            try:
                selected = collector.select(selection.questionId, selection.optionId)
            except ValueError as e:
                return {"success": False, "data": None, "error": str(e)}

            selected_answers = sorted(selected)
            saved = self.answer_model.save_selection(attempt.id, selection.questionId, selected_answers)
            if not saved or self.attempt_model.get_attempt(attempt.id).is_terminal:
                return {"success": False, "data": None, "error": "This attempt has already been submitted"}
            return {
                "success": True,
                "data": {"questionId": selection.questionId, "selectedAnswers": selected_answers}
            }
        except Exception as e:
            print(f"[Attempts] select failed for attempt={attempt_id}: {e}")
            return {"success": False, "data": None, "error": "Failed to save answer"}

    def submit_attempt(self, session: SessionContext, attempt_id: str) -> dict:
        try:
            attempt, test, error = self._load_attempt(session, attempt_id)
            if error:
                return {"success": False, "data": None, "error": error}
            if attempt.is_terminal:
                return {"success": True, "data": self._result(attempt, test, already_submitted=True)}

            now = datetime.utcnow()
            if AttemptTimer(attempt.durationMinutes, attempt.startedAt).is_expired(now):
                status = AttemptStatus.AUTO_SUBMITTED
            else:
                status = AttemptStatus.SUBMITTED

            finished, already_submitted = self._finish(attempt, test, status, now)
            return {"success": True, "data": self._result(finished, test, already_submitted)}
        except Exception as e:
            print(f"[Attempts] submit failed for attempt={attempt_id}: {e}")
            return {"success": False, "data": None, "error": "Failed to submit test"}

    def auto_submit_expired(self, now: Optional[datetime] = None) -> dict:
        """Finish every in-progress attempt whose time is up."""
        try:
            attempts = self.attempt_model.get_attempts({"status": AttemptStatus.IN_PROGRESS.value})
            tests = {}
            submitted = 0
            for attempt in attempts:
                if attempt.testId not in tests:
                    tests[attempt.testId] = self.test_model.get_test(attempt.testId)
                test = tests[attempt.testId]
                if not test:
                    continue
                finished = self._expire_if_due(attempt, test, now)
                if finished is not attempt and finished.status == AttemptStatus.AUTO_SUBMITTED:
                    submitted += 1
            return {"success": True, "data": {"checked": len(attempts), "autoSubmitted": submitted}}
        except Exception as e:
            print(f"[Attempts] auto submit sweep failed: {e}")
            return {"success": False, "data": None, "error": "Failed to auto submit attempts"}

    def list_history(self, session: SessionContext) -> dict:
        try:
            attempts = self.attempt_model.get_attempts(
                {"userId": session.userId, "status": {"$ne": AttemptStatus.IN_PROGRESS.value}}
            )
            titles = self.test_model.get_titles([attempt.testId for attempt in attempts])
            history = []
            for attempt in attempts:
                seconds = attempt.timeTakenSeconds
                history.append({
                    "attemptId": attempt.id,
                    "testId": attempt.testId,
                    "testTitle": titles.get(attempt.testId),
                    "score": attempt.score,
                    "totalMarks": attempt.totalMarks,
                    "percentage": format_percentage(attempt.score, attempt.totalMarks),
                    "passed": has_passed(attempt.score, attempt.totalMarks),
                    "timeTakenSeconds": seconds,
                    "timeTakenMinutes": int(seconds / 60 + 0.5) if seconds else None,
                    "status": attempt.status.value,
                    "submittedAt": attempt.submittedAt,
                })
            return {"success": True, "data": history}
        except Exception as e:
            print(f"[Attempts] history failed for user={session.userId}: {e}")
            return {"success": False, "data": None, "error": "Failed to load history"}

    def review_attempt(self, session: SessionContext, attempt_id: str) -> dict:
        try:
            attempt, test, error = self._load_attempt(session, attempt_id, allow_admin=True)
            if error:
                return {"success": False, "data": None, "error": error}
            attempt = self._expire_if_due(attempt, test)
            if not attempt.is_terminal:
                return {"success": False, "data": None, "error": "Attempt has not been submitted yet"}

            answers = {answer.questionId: answer for answer in self.answer_model.get_answers(attempt.id)}
            questions = []
            for question in self.question_model.get_questions(test.id):
                answer = answers.get(question.id)
                selected = answer.selectedAnswers if answer else []
                if not selected:
                    outcome = "Skipped"
                elif answer.isCorrect:
                    outcome = "Correct"
                else:
                    outcome = "Wrong"
                questions.append({
                    **question.for_student(),
                    "correctAnswers": question.correctAnswers,
                    "selectedAnswers": selected,
                    "isCorrect": bool(answer and answer.isCorrect),
                    "marksObtained": answer.marksObtained if answer else 0,
                    "outcome": outcome,
                })
            return {
                "success": True,
                "data": {"result": self._result(attempt, test), "questions": questions}
            }
        except Exception as e:
            print(f"[Attempts] review failed for attempt={attempt_id}: {e}")
            return {"success": False, "data": None, "error": "Failed to load attempt"}
