"""
Decoder for app messages received over the call's data channel.

This module turns the raw bytes delivered by the transport into exactly one
typed event per message:
- Reverses the quote/backslash escaping the transport applies to plain-text payloads
- Detects the ``listening`` readiness sentinel before any JSON parsing
- Reads the ``type`` discriminator through a minimal envelope
- Routes the message to the handler registered for that type

Malformed or unknown messages never raise; they are logged together with the
offending text and returned as an ErrorEvent wrapping a DecodeError.
"""

import json
import logging
from typing import Any, Callable, Dict, Optional, Tuple, Union

from pydantic import ValidationError

from vapi_client.config.constants import (
    LISTENING_SENTINEL,
    LOGGER_NAME,
    MESSAGE_TYPE_CONVERSATION_UPDATE,
    MESSAGE_TYPE_FUNCTION_CALL,
    MESSAGE_TYPE_HANG,
    MESSAGE_TYPE_METADATA,
    MESSAGE_TYPE_SPEECH_UPDATE,
    MESSAGE_TYPE_TOOL_CALLS,
    MESSAGE_TYPE_TRANSCRIPT,
)
from vapi_client.errors import DecodeError
from vapi_client.handlers.app_message_handlers import (
    handle_conversation_update,
    handle_function_call,
    handle_hang,
    handle_metadata,
    handle_speech_update,
    handle_tool_calls,
    handle_transcript,
)
from vapi_client.models.events import CallStarted, ErrorEvent, Event
from vapi_client.models.message_schemas import AppMessageEnvelope

logger = logging.getLogger(LOGGER_NAME)

# Type hint for handler functions
HandlerFunc = Callable[[Dict[str, Any]], Event]


def unescape_app_message(text: str) -> str:
    """
    Undo the string-literal wrapping applied to non-JSON payloads.

    ``"\\"listening\\""`` becomes ``listening``. Text that is not wrapped in
    double quotes is returned unchanged.
    """
    if len(text) < 2 or not (text.startswith('"') and text.endswith('"')):
        return text

    unescaped = text[1:-1]
    unescaped = unescaped.replace("\\\\", "\\")
    unescaped = unescaped.replace('\\"', '"')
    return unescaped


class AppMessageDecoder:
    """Decodes raw app messages into events.

    The decoder holds no mutable state beyond its handler table, so a single
    instance can be shared and called concurrently with control operations.
    """

    def __init__(self):
        self.handlers: Dict[str, HandlerFunc] = {
            MESSAGE_TYPE_TRANSCRIPT: handle_transcript,
            MESSAGE_TYPE_FUNCTION_CALL: handle_function_call,
            MESSAGE_TYPE_SPEECH_UPDATE: handle_speech_update,
            MESSAGE_TYPE_METADATA: handle_metadata,
            MESSAGE_TYPE_CONVERSATION_UPDATE: handle_conversation_update,
            MESSAGE_TYPE_HANG: handle_hang,
            MESSAGE_TYPE_TOOL_CALLS: handle_tool_calls,
        }

    def decode(self, raw: Union[bytes, str]) -> Event:
        """Decode one raw app message into exactly one event.

        Args:
            raw: Message payload as delivered by the transport

        Returns:
            The decoded event, or an ErrorEvent describing why decoding failed
        """
        raw_text: Optional[str] = None
        try:
            raw_text = self._to_text(raw)
            return self._decode_text(raw_text)
        except DecodeError as e:
            if e.raw_text is None:
                e.raw_text = raw_text
            logger.error(f'Error parsing app message "{e.raw_text}": {e.reason}')
            return ErrorEvent(error=e)

    def _to_text(self, raw: Union[bytes, str]) -> str:
        if isinstance(raw, str):
            return raw
        try:
            return bytes(raw).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(
                f"App message is not valid UTF-8: {e}",
                raw_text=bytes(raw).decode("utf-8", errors="replace"),
            )

    def _decode_text(self, raw_text: str) -> Event:
        text = unescape_app_message(raw_text)

        # The readiness sentinel is plain text, not JSON
        if text == LISTENING_SENTINEL:
            logger.info("Assistant is listening")
            return CallStarted()

        message, message_type = self._read_envelope(text, raw_text)

        handler = self.handlers.get(message_type)
        if handler is None:
            raise DecodeError(f"Unknown app message type: {message_type}", raw_text)

        try:
            return handler(message)
        except ValidationError as e:
            raise DecodeError(
                f"Invalid {message_type} message: {e.error_count()} validation error(s): {e}",
                raw_text,
            )
        except RecursionError:
            raise DecodeError(f"Invalid {message_type} message: nested too deeply", raw_text)
        except DecodeError as e:
            e.raw_text = raw_text
            raise

    def _read_envelope(self, text: str, raw_text: str) -> Tuple[Dict[str, Any], str]:
        try:
            message = json.loads(text)
        except ValueError as e:
            raise DecodeError(f"App message isn't valid JSON: {e}", raw_text)
        except RecursionError:
            raise DecodeError("App message is nested too deeply", raw_text)

        if not isinstance(message, dict):
            raise DecodeError("App message isn't a valid JSON object", raw_text)

        try:
            envelope = AppMessageEnvelope.model_validate(message)
        except ValidationError:
            raise DecodeError("App message is missing a string type", raw_text)

        return message, envelope.type
