"""
Events published on the event bus.

Every event is an immutable pydantic model tagged by a ``type`` literal, so
consumers can either match on the class or on ``event.type``. One event is
produced per decoded app message and per lifecycle transition.
"""

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict

from vapi_client.errors import VapiError
from vapi_client.models.message_schemas import (
    ConversationUpdate,
    FunctionCall,
    Metadata,
    SpeechUpdate,
    ToolCalls,
    Transcript,
)


class BaseEvent(BaseModel):
    """Base model for all events."""

    model_config = ConfigDict(frozen=True)


class CallStarted(BaseEvent):
    type: Literal["call-started"] = "call-started"


class CallEnded(BaseEvent):
    type: Literal["call-ended"] = "call-ended"


class TranscriptEvent(BaseEvent):
    type: Literal["transcript"] = "transcript"
    transcript: Transcript


class FunctionCallEvent(BaseEvent):
    type: Literal["function-call"] = "function-call"
    function_call: FunctionCall


class SpeechUpdateEvent(BaseEvent):
    type: Literal["speech-update"] = "speech-update"
    speech_update: SpeechUpdate


class MetadataEvent(BaseEvent):
    type: Literal["metadata"] = "metadata"
    metadata: Metadata


class ConversationUpdateEvent(BaseEvent):
    type: Literal["conversation-update"] = "conversation-update"
    conversation_update: ConversationUpdate


class ToolCallsEvent(BaseEvent):
    type: Literal["tool-calls"] = "tool-calls"
    tool_calls: ToolCalls


class Hang(BaseEvent):
    type: Literal["hang"] = "hang"


class ErrorEvent(BaseEvent):
    """An asynchronous failure: provisioning, join, leave or decode."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    type: Literal["error"] = "error"
    error: VapiError


# Union type for everything the bus can deliver
Event = Union[
    CallStarted,
    CallEnded,
    TranscriptEvent,
    FunctionCallEvent,
    SpeechUpdateEvent,
    MetadataEvent,
    ConversationUpdateEvent,
    ToolCallsEvent,
    Hang,
    ErrorEvent,
]
