from datetime import datetime
import os
from pymongo import ReturnDocument
from app.helpers.Database import MongoDB
from app.schemas.PyObjectId import PyObjectId
from app.schemas.Attempts import Attempt, AttemptStatus
from bson import ObjectId
from typing import List, Optional

class AttemptModel:
    def __init__(self, db_name: Optional[str] = None, collection_name="TestAttempts"):
        database_name = db_name or os.getenv("DB_NAME")
        if not database_name:
            raise ValueError("DB_NAME environment variable is not set")
        self.collection = MongoDB.get_database(database_name)[collection_name]
        self.collection.create_index([("userId", 1), ("testId", 1)])
        self.collection.create_index([("status", 1)])

    def create_attempt(self, data: dict) -> PyObjectId:
        """
        Create a new in-progress attempt.
        """
        data["createdOn"] = datetime.utcnow()
        data.setdefault("startedAt", datetime.utcnow())
        data["status"] = AttemptStatus.IN_PROGRESS.value
        result = self.collection.insert_one(data)
        return result.inserted_id

    def get_attempt(self, attempt_id: str) -> Optional[Attempt]:
        if not ObjectId.is_valid(attempt_id):
            return None
        document = self.collection.find_one({"_id": ObjectId(attempt_id)})
        if document:
            return Attempt(**document)
        return None

    def find_attempt(self, filters: dict) -> Optional[Attempt]:
        document = self.collection.find_one(filters, sort=[("createdOn", -1)])
        if document:
            return Attempt(**document)
        return None

    def get_attempts(self, filters: dict = {}, skip: int = 0, limit: int = 0) -> List[Attempt]:
        cursor = self.collection.find(filters).sort("createdOn", -1).skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return [Attempt(**doc) for doc in cursor]

    def finish_attempt(self, attempt_id: str, data: dict) -> Optional[Attempt]:
        """
        Move an attempt out of `in_progress`.

        The status is part of the filter, so only the first caller wins; a
        later caller gets None and must treat the attempt as already finished.
        """
        document = self.collection.find_one_and_update(
            {"_id": ObjectId(attempt_id), "status": AttemptStatus.IN_PROGRESS.value},
            {"$set": data},
            return_document=ReturnDocument.AFTER,
        )
        if document:
            return Attempt(**document)
        return None

    def count_attempts(self, filters: dict) -> int:
        return self.collection.count_documents(filters)

    def get_attempt_ids(self, filters: dict) -> List[str]:
        return [str(doc["_id"]) for doc in self.collection.find(filters, {"_id": 1})]

    def delete_attempts(self, filters: dict) -> int:
        result = self.collection.delete_many(filters)
        return result.deleted_count
