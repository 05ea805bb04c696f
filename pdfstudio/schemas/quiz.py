from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr
from typing import List


# ── Response ─────────────────────────────────────────────────────────────────

class QuizQuestion(BaseModel):
    """A single multiple-choice question, exactly as the model returned it."""
    model_config = ConfigDict(populate_by_name=True)

    question: StrictStr
    options: List[StrictStr]
    correct_answer: StrictInt = Field(..., alias="correctAnswer")
    explanation: StrictStr


class QuizArtifact(BaseModel):
    """Ordered list of questions; any count (including zero) is accepted."""
    questions: List[QuizQuestion]
