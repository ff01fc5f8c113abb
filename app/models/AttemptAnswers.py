import os
from datetime import datetime
from typing import Dict, List, Optional

from pymongo.errors import DuplicateKeyError

from app.helpers.Database import MongoDB
from app.schemas.Attempts import AnswerRecord, GradedAnswer


class AttemptAnswerModel:
    def __init__(self, db_name: Optional[str] = None, collection_name="AttemptAnswers"):
        database_name = db_name or os.getenv("DB_NAME")
        if not database_name:
            raise ValueError("DB_NAME environment variable is not set")
        self.collection = MongoDB.get_database(database_name)[collection_name]
        self.collection.create_index([("attemptId", 1), ("questionId", 1)], unique=True)

    def get_answers(self, attempt_id: str) -> List[AnswerRecord]:
        cursor = self.collection.find({"attemptId": attempt_id})
        return [AnswerRecord(**doc) for doc in cursor]

    def get_selections(self, attempt_id: str) -> Dict[str, List[str]]:
        return {
            answer.questionId: answer.selectedAnswers
            for answer in self.get_answers(attempt_id)
        }

    def save_selection(self, attempt_id: str, question_id: str, selected: List[str]) -> bool:
        """
        Store the current selection for one question. Grading fields stay at
        their defaults until the attempt is finished.

        Graded records never match the filter, so the upsert hits the unique
        index instead and the selection is refused. Returns False in that case.
        """
        now = datetime.utcnow()
        try:
            self.collection.update_one(
                {"attemptId": attempt_id, "questionId": question_id, "graded": {"$ne": True}},
                {
                    "$set": {"selectedAnswers": selected, "updatedOn": now},
                    "$setOnInsert": {
                        "isCorrect": False, "marksObtained": 0, "graded": False, "createdOn": now
                    },
                },
                upsert=True,
            )
        except DuplicateKeyError:
            return False
        return True

    def save_grades(self, attempt_id: str, answers: List[GradedAnswer]) -> None:
        """Write the graded record of every question and lock it against new selections."""
        now = datetime.utcnow()
        for answer in answers:
            self.collection.update_one(
                {"attemptId": attempt_id, "questionId": answer.questionId},
                {
                    "$set": {
                        "selectedAnswers": answer.selectedAnswers,
                        "isCorrect": answer.isCorrect,
                        "marksObtained": answer.marksObtained,
                        "graded": True,
                        "updatedOn": now,
                    },
                    "$setOnInsert": {"createdOn": now},
                },
                upsert=True,
            )

    def release_grades(self, attempt_id: str) -> int:
        """Unlock the records of an attempt whose terminal write did not happen."""
        result = self.collection.update_many(
            {"attemptId": attempt_id},
            {"$set": {"graded": False, "isCorrect": False, "marksObtained": 0}},
        )
        return result.modified_count

    def delete_answers(self, attempt_ids: List[str]) -> int:
        if not attempt_ids:
            return 0
        result = self.collection.delete_many({"attemptId": {"$in": attempt_ids}})
        return result.deleted_count
