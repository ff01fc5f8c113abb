from app.schemas.PyObjectId import PyObjectId
