"""
Handlers for each inbound app message type.

Each handler receives the parsed JSON object of one app message and returns the
event it maps to. Handlers validate through the pydantic models; validation
failures propagate to the decoder, which turns them into a single ErrorEvent.
"""

import logging
from typing import Any, Dict

from vapi_client.config.constants import LOGGER_NAME
from vapi_client.errors import DecodeError
from vapi_client.models.events import (
    ConversationUpdateEvent,
    FunctionCallEvent,
    Hang,
    MetadataEvent,
    SpeechUpdateEvent,
    ToolCallsEvent,
    TranscriptEvent,
)
from vapi_client.models.message_schemas import (
    ConversationUpdate,
    FunctionCall,
    Metadata,
    SpeechUpdate,
    ToolCalls,
    Transcript,
)
from vapi_client.models.wire_value import is_object

logger = logging.getLogger(LOGGER_NAME)


def handle_transcript(message: Dict[str, Any]) -> TranscriptEvent:
    """Handle a transcript fragment, partial or final."""
    transcript = Transcript.model_validate(message)
    logger.debug(f"Transcript ({transcript.role}, {transcript.transcriptType}): {transcript.transcript}")
    return TranscriptEvent(transcript=transcript)


def handle_function_call(message: Dict[str, Any]) -> FunctionCallEvent:
    """
    Handle the legacy function-call message.

    The call is nested under ``functionCall`` rather than at the top level:

        {"type": "function-call", "functionCall": {"name": "...", "parameters": {...}}}

    Raises:
        DecodeError: If the nested object, its name or its parameters are missing
    """
    function_call = message.get("functionCall")
    if not is_object(function_call):
        raise DecodeError("App message missing functionCall")

    name = function_call.get("name")
    if not isinstance(name, str):
        raise DecodeError("App message missing name")

    parameters = function_call.get("parameters")
    if not is_object(parameters):
        raise DecodeError("App message missing parameters")

    logger.info(f"Function call received: {name}")
    return FunctionCallEvent(function_call=FunctionCall(name=name, parameters=parameters))


def handle_speech_update(message: Dict[str, Any]) -> SpeechUpdateEvent:
    return SpeechUpdateEvent(speech_update=SpeechUpdate.model_validate(message))


def handle_metadata(message: Dict[str, Any]) -> MetadataEvent:
    return MetadataEvent(metadata=Metadata.model_validate(message))


def handle_conversation_update(message: Dict[str, Any]) -> ConversationUpdateEvent:
    """Handle a conversation snapshot, keeping the delivered order of turns."""
    update = ConversationUpdate.model_validate(message)
    logger.debug(
        f"Conversation update with {len(update.conversation)} messages"
        + (f" and {len(update.messages)} timestamped messages" if update.messages else "")
    )
    return ConversationUpdateEvent(conversation_update=update)


def handle_tool_calls(message: Dict[str, Any]) -> ToolCallsEvent:
    tool_calls = ToolCalls.model_validate(message)
    logger.info(
        f"Tool calls received: {[call.function.name for call in tool_calls.toolCalls if call.function]}"
    )
    return ToolCallsEvent(tool_calls=tool_calls)


def handle_hang(message: Dict[str, Any]) -> Hang:
    """Handle the hang signal. The message carries no payload."""
    logger.warning("Assistant reported a hang")
    return Hang()
