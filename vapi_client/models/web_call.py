"""
Models for the web call provisioning request/response and for outbound app messages.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


class ArtifactPlan(BaseModel):
    """Recording settings the backend applied to the call."""

    videoRecordingEnabled: bool


class WebCallResponse(BaseModel):
    """Response body of a successful ``POST /call/web``."""

    id: str = Field(..., description="Identifier of the created call")
    webCallUrl: str = Field(..., description="Room URL the transport must join")
    artifactPlan: Optional[ArtifactPlan] = None

    @field_validator("webCallUrl")
    def validate_web_call_url(cls, v):
        """Validate that the join URL is present."""
        if not v.strip():
            raise ValueError("webCallUrl cannot be empty")
        return v


class WebCallRequest(BaseModel):
    """Request body of ``POST /call/web``. Exactly one assistant form is set."""

    assistantId: Optional[str] = None
    assistant: Optional[Dict[str, Any]] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    assistantOverrides: Dict[str, Any] = Field(default_factory=dict)

    def to_body(self) -> Dict[str, Any]:
        """Return the JSON body, leaving out the unused assistant form."""
        return self.model_dump(exclude_none=True)


class OutboundMessageContent(BaseModel):
    role: str
    content: str


class OutboundMessage(BaseModel):
    """Envelope for messages the client sends to the assistant."""

    type: str = Field(..., description="Message type, e.g. 'add-message'")
    message: OutboundMessageContent

    @classmethod
    def create(cls, type: str, role: str, content: str) -> "OutboundMessage":
        return cls(type=type, message=OutboundMessageContent(role=role, content=content))
