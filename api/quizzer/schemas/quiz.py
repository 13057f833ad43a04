from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class QuizQuestion(BaseModel):
    # models name the choice/answer keys differently; keep whatever they send
    model_config = ConfigDict(extra="allow")

    question: str

    @field_validator("question")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("question is blank")
        return v.strip()


class Quiz(BaseModel):
    model_config = ConfigDict(extra="allow")

    questions: List[QuizQuestion] = Field(min_length=1)
