import os
from typing import List, Optional
from datetime import datetime

from bson import ObjectId

from app.helpers.Database import MongoDB
from app.schemas.Tests import Question


class QuestionModel:
    def __init__(self, db_name: Optional[str] = None, collection_name="Questions"):
        database_name = db_name or os.getenv("DB_NAME")
        if not database_name:
            raise ValueError("DB_NAME environment variable is not set")
        self.collection = MongoDB.get_database(database_name)[collection_name]
        self.collection.create_index([("testId", 1), ("orderIndex", 1)])

    def add_questions(self, test_id: str, questions: List[dict], keep_ids: Optional[List[ObjectId]] = None) -> List:
        """
        Insert a test's questions in order.
        If the insert fails part way, every question of the test outside
        `keep_ids` is removed again before the error propagates.
        """
        if not questions:
            return []
        documents = []
        for index, question in enumerate(questions):
            document = dict(question)
            document["testId"] = test_id
            document["orderIndex"] = index
            document["createdOn"] = datetime.utcnow()
            documents.append(document)
        try:
            result = self.collection.insert_many(documents)
        except Exception:
            self.delete_questions(test_id, keep_ids=keep_ids or [])
            raise
        return result.inserted_ids

    def get_questions(self, test_id: str) -> List[Question]:
        cursor = self.collection.find({"testId": test_id}).sort("orderIndex", 1)
        return [Question(**doc) for doc in cursor]

    def get_question_ids(self, test_id: str) -> List[ObjectId]:
        return [doc["_id"] for doc in self.collection.find({"testId": test_id}, {"_id": 1})]

    def delete_questions(self, test_id: str, keep_ids: Optional[List[ObjectId]] = None) -> int:
        filters = {"testId": test_id}
        if keep_ids is not None:
            filters["_id"] = {"$nin": keep_ids}
        result = self.collection.delete_many(filters)
        return result.deleted_count

    def delete_questions_by_ids(self, question_ids: List[ObjectId]) -> int:
        if not question_ids:
            return 0
        result = self.collection.delete_many({"_id": {"$in": question_ids}})
        return result.deleted_count
