from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Any, Optional

from palate.schemas.product import ProductOut

# Request bodies never carry owner or parent ids: those come from the
# authenticated account and the URL path, and extra fields are rejected.

class QuestionnaireCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str
    description: Optional[str] = None

class QuestionnaireUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    is_published: Optional[bool] = None

class QuestionnaireOut(BaseModel):
    id: str
    account_id: str
    title: str
    description: Optional[str]
    is_published: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class PublicQuestionnaireOut(BaseModel):
    id: str
    title: str
    description: Optional[str]

    model_config = ConfigDict(from_attributes=True)

class QuestionCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    question_text: str
    question_type: str  # multiple-choice / rating / text
    options: Optional[list[str]] = None

class QuestionOut(BaseModel):
    id: str
    questionnaire_id: str
    question_text: str
    question_type: str
    options: Optional[list[str]] = None
    order: int

    model_config = ConfigDict(from_attributes=True)

class ResponseSubmit(BaseModel):
    model_config = ConfigDict(extra="forbid")

    customer_email: Optional[str] = None
    answers: dict[str, Any]  # {question_id: answer value}

class ResponseOut(BaseModel):
    id: str
    questionnaire_id: str
    customer_email: Optional[str]
    answers: dict[str, str]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class ResponseReceipt(BaseModel):
    id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class RecommendationItem(BaseModel):
    product: ProductOut
    score: int

class SubmissionOut(BaseModel):
    response: ResponseReceipt
    recommendations: list[RecommendationItem]
