from typing import Optional
from app.helpers.Database import MongoDB
from bson import ObjectId
import os
from app.schemas.User import UserSchema
from datetime import datetime
from app.schemas.PyObjectId import PyObjectId
from dotenv import load_dotenv

load_dotenv()

class UserModel:
    def __init__(self, db_name: Optional[str] = None, collection_name="Users"):
        database_name = db_name or os.getenv("DB_NAME")
        if not database_name:
            raise ValueError("DB_NAME environment variable is not set")
        self.collection = MongoDB.get_database(database_name)[collection_name]
        self.collection.create_index("email", unique=True)

    def get_user(self, filters: dict) -> Optional[UserSchema]:
        """
        Retrieve a single user matching the given filters.
        """
        document = self.collection.find_one(filters)
        if document:
            return UserSchema(**document)
        return None

    def get_user_by_id(self, user_id: str) -> Optional[UserSchema]:
        if not ObjectId.is_valid(user_id):
            return None
        return self.get_user({"_id": ObjectId(user_id)})

    def get_users_by_ids(self, user_ids: list) -> dict:
        """
        Map of user id -> user for the given ids, skipping anything unknown.
        """
        object_ids = [ObjectId(user_id) for user_id in user_ids if ObjectId.is_valid(user_id)]
        cursor = self.collection.find({"_id": {"$in": object_ids}})
        return {str(doc["_id"]): UserSchema(**doc) for doc in cursor}

    def create_user(self, data: dict) -> PyObjectId:
        """
        Create a new user document in the database.
        """
        data["createdOn"] = datetime.utcnow()
        data["updatedOn"] = datetime.utcnow()
        user = UserSchema(**data)
        document = user.model_dump(by_alias=True, exclude={"id"})
        document["role"] = user.role.value
        result = self.collection.insert_one(document)
        return result.inserted_id
