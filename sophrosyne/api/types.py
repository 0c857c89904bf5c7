"""
API request and response schemas.
What it defines:
- Input payloads
- Validation rules

And, the main purpose:
Ensure structured communication between client and server.
"""


from pydantic import BaseModel, Field

class StartJourneyRequest(BaseModel):
    user_id: str = Field(..., description="Your app user identifier")
    goal: str
    maturity_level: str = ""

class UserRequest(BaseModel):
    user_id: str

class FeedbackRequest(BaseModel):
    user_id: str
    day_id: str = Field(..., description="Day identifier, e.g. day_3")
    rating: int = Field(..., ge=1, le=5)
    text: str | None = None

class ReflectionRequest(BaseModel):
    user_id: str
    day_number: int = Field(..., ge=1)
    question: str
