from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

CopyStyle = Literal["facts", "humour", "smart", "emotional", "professional"]
MediaType = Literal["google-ads", "linkedin", "email", "print", "social-media"]


class ChatRequest(BaseModel):
    message: str
    thread_id: str = "default_thread"


class ChatMessage(BaseModel):
    role: str
    content: str


class ChatCompletionRequest(BaseModel):
    messages: List[ChatMessage]


class CompanyCreateRequest(BaseModel):
    name: str
    fields: Dict[str, str] = Field(default_factory=dict)


class FieldUpdateRequest(BaseModel):
    field: str = Field(..., min_length=1)
    value: str


class ICPGenerationRequest(BaseModel):
    companyId: Optional[int] = Field(None, description="Defaults to the active company")


class CampaignGenerationRequest(BaseModel):
    icpId: str = Field(..., min_length=1)
    copyStyle: CopyStyle
    mediaType: MediaType
    imagePrompt: Optional[str] = None
    campaignDetails: Optional[str] = None


class CampaignUpdateRequest(BaseModel):
    name: Optional[str] = None
    copyStyle: Optional[CopyStyle] = None
    mediaType: Optional[MediaType] = None
    adCopy: Optional[str] = None
    imagePrompt: Optional[str] = None
    imageUrl: Optional[str] = None
    cta: Optional[str] = None
    hooks: Optional[str] = None
    landingPageCopy: Optional[str] = None
