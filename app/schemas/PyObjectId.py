from typing import Annotated

from bson import ObjectId
from pydantic import BeforeValidator


def _stringify(value):
    if isinstance(value, ObjectId):
        return str(value)
    return value


# Mongo `_id` values are ObjectIds in storage and plain strings everywhere else.
PyObjectId = Annotated[str, BeforeValidator(_stringify)]
