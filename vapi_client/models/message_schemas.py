"""
Pydantic models for the app messages the assistant sends over the data channel.

This module defines structured data models for every inbound app message type,
plus the minimal envelope used to read the ``type`` discriminator before the
full decode. Several fields are loosely typed on the wire (timestamps arrive
either as numbers or as numeric strings, tool arguments either as embedded JSON
strings or as nested objects); the models normalise those here so consumers see
a single shape.
"""

import math
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from vapi_client.models.wire_value import WireValue, expand_embedded_json, is_number


def tolerant_float(value: Any) -> float:
    """
    Decode a number that may have been sent as a JSON number or a string.

    The native number is tried first, then the string form is parsed.

    Raises:
        ValueError: If the value is neither a finite number nor a numeric string
    """
    if is_number(value):
        number = float(value)
    elif isinstance(value, str):
        try:
            # float() also takes digit separators, which JSON numbers never carry
            if "_" in value:
                raise ValueError(value)
            number = float(value.strip())
        except ValueError:
            raise ValueError(f"Expected a number or numeric string, got {value!r}")
    else:
        raise ValueError(f"Expected a number or numeric string, got {type(value).__name__}")

    if not math.isfinite(number):
        raise ValueError(f"Expected a finite number, got {value!r}")
    return number


class AppMessageEnvelope(BaseModel):
    """Minimal shape used only to read the message type."""

    type: str = Field(..., description="Message type discriminator")


class ToolFunction(BaseModel):
    """Function invoked by a tool call."""

    name: str = Field(..., description="Name of the function to call")
    arguments: WireValue = Field(
        ...,
        description="Arguments, as an embedded JSON string or a nested object",
    )

    def parsed_arguments(self) -> WireValue:
        """Return the arguments with any embedded JSON string decoded."""
        return expand_embedded_json(self.arguments)


class ToolCall(BaseModel):
    """A function invocation requested by the assistant."""

    id: Optional[str] = Field(None, description="Tool call identifier")
    type: Optional[str] = Field(None, description="Tool call type, usually 'function'")
    function: Optional[ToolFunction] = None


class Message(BaseModel):
    """One turn in the conversation, in OpenAI chat format."""

    role: Literal["user", "assistant", "system", "tool", "tool_calls", "bot"]
    content: Optional[str] = None
    tool_calls: Optional[List[ToolCall]] = None
    tool_call_id: Optional[str] = None


class TimestampedMessage(BaseModel):
    """One turn in the conversation with its timing information."""

    role: Literal["user", "bot", "system", "tool", "tool_calls"]
    message: Optional[str] = None
    time: float = Field(..., description="Epoch milliseconds when the turn started")
    endTime: Optional[float] = None
    secondsFromStart: Optional[float] = None
    duration: Optional[float] = None
    toolCalls: Optional[List[ToolCall]] = None

    @field_validator("time", "endTime", "secondsFromStart", "duration", mode="before")
    def validate_numeric(cls, v):
        """Accept native numbers and numeric strings alike."""
        if v is None:
            return v
        return tolerant_float(v)


class ConversationUpdate(BaseModel):
    """Snapshot of the conversation so far."""

    conversation: List[Message]
    messages: Optional[List[TimestampedMessage]] = None
    messagesOpenAIFormatted: Optional[List[WireValue]] = None


class Transcript(BaseModel):
    """Speech-to-text fragment."""

    role: Literal["assistant", "user"]
    transcriptType: Literal["final", "partial"]
    transcript: str


class SpeechUpdate(BaseModel):
    """Voice activity signal for one side of the call."""

    status: Literal["started", "stopped"]
    role: Literal["assistant", "user"]


class Metadata(BaseModel):
    """Opaque sideband payload."""

    metadata: WireValue = Field(..., description="Free-form string or object")


class FunctionCall(BaseModel):
    """Legacy single function invocation."""

    name: str
    parameters: Dict[str, WireValue]


class ToolCalls(BaseModel):
    """Batch of tool calls, with arguments delivered as nested objects."""

    toolCalls: List[ToolCall]
