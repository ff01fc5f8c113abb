from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

from app.schemas.PyObjectId import PyObjectId


class AttemptStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"
    AUTO_SUBMITTED = "auto_submitted"


class Attempt(BaseModel):
    id: Optional[PyObjectId] = Field(default=None, alias="_id")
    testId: str
    userId: str
    startedAt: datetime
    durationMinutes: int
    submittedAt: Optional[datetime] = None
    timeTakenSeconds: Optional[int] = None
    score: int = 0
    totalMarks: int = 0
    percentage: Optional[float] = None
    status: AttemptStatus = AttemptStatus.IN_PROGRESS
    createdOn: Optional[datetime] = None

    class Config:
        populate_by_name = True

    @property
    def is_terminal(self) -> bool:
        return self.status != AttemptStatus.IN_PROGRESS


class AnswerRecord(BaseModel):
    id: Optional[PyObjectId] = Field(default=None, alias="_id")
    attemptId: str
    questionId: str
    selectedAnswers: List[str] = []
    isCorrect: bool = False
    marksObtained: int = 0
    graded: bool = False
    createdOn: Optional[datetime] = None
    updatedOn: Optional[datetime] = None

    class Config:
        populate_by_name = True


class OptionSelection(BaseModel):
    questionId: str
    optionId: str


class GradedAnswer(BaseModel):
    questionId: str
    selectedAnswers: List[str]
    isCorrect: bool
    marksObtained: int


class ScoreSheet(BaseModel):
    score: int
    totalMarks: int
    percentage: float
    answers: List[GradedAnswer]
