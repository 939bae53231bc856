"""
Pydantic models for the resume, interview and industry insight endpoints.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ResumeCrewRequest(BaseModel):
    """Resume analysis submission."""

    resume_text: str = Field("", description="Plain text extracted from the resume.")
    target_role: str = Field("", description="Role the candidate is applying for.")
    job_posting_url: str = Field("", description="Link to the job description.")

    def missing_fields(self) -> List[str]:
        return [
            name
            for name in ("resume_text", "target_role", "job_posting_url")
            if not getattr(self, name).strip()
        ]

    def to_inputs(self) -> Dict[str, Any]:
        return {
            "resume_text": self.resume_text,
            "target_role": self.target_role,
            "job_posting_url": self.job_posting_url,
        }


class InterviewMetadata(BaseModel):
    """Interview context generated alongside the question list."""

    topic: str = ""
    difficulty: str = ""
    expected_keywords: List[str] = Field(default_factory=list)


class QAPair(BaseModel):
    question: str
    answer: str = ""


class InterviewSummary(BaseModel):
    total_questions: int = Field(0, alias="totalQuestions")
    topic: str = ""
    difficulty: str = ""
    expected_keywords: List[str] = Field(default_factory=list, alias="expectedKeywords")

    model_config = ConfigDict(populate_by_name=True)


class InterviewFeedbackRequest(BaseModel):
    """Answers from a finished mock interview, submitted for evaluation."""

    session_id: str = Field("", alias="sessionId")
    metadata: Optional[InterviewMetadata] = None
    qa_pairs: List[QAPair] = Field(default_factory=list, alias="qaPairs")
    interview_summary: Optional[InterviewSummary] = Field(
        None, alias="interviewSummary"
    )

    model_config = ConfigDict(populate_by_name=True)

    def to_inputs(self) -> Dict[str, Any]:
        metadata = self.metadata or InterviewMetadata()
        return {
            "interview_data": {
                "topic": metadata.topic,
                "difficulty": metadata.difficulty,
                "expected_keywords": metadata.expected_keywords,
                "questions_and_answers": [
                    {"question": pair.question, "answer": pair.answer}
                    for pair in self.qa_pairs
                ],
            }
        }


class InterviewFeedbackResult(BaseModel):
    success: bool = True
    data: Dict[str, Any]
    session_id: str
    message: str = "Interview analysis completed successfully"


class IndustryInsightRequest(BaseModel):
    target_role: str = Field("", alias="targetRole")

    model_config = ConfigDict(populate_by_name=True)

    def to_inputs(self) -> Dict[str, Any]:
        return {"job_title": self.target_role.strip()}


__all__ = [
    "IndustryInsightRequest",
    "InterviewFeedbackRequest",
    "InterviewFeedbackResult",
    "InterviewMetadata",
    "InterviewSummary",
    "QAPair",
    "ResumeCrewRequest",
]
