"""
Unit tests for the app message decoder.

These tests feed raw payloads, exactly as the transport delivers them, through
the decoder and check that each one yields exactly one event of the right type.
"""

import json
import logging

import pytest

from vapi_client.app_message_decoder import AppMessageDecoder, unescape_app_message
from vapi_client.errors import DecodeError
from vapi_client.models.events import (
    CallStarted,
    ConversationUpdateEvent,
    ErrorEvent,
    FunctionCallEvent,
    Hang,
    MetadataEvent,
    SpeechUpdateEvent,
    ToolCallsEvent,
    TranscriptEvent,
)


@pytest.fixture
def decoder():
    return AppMessageDecoder()


def encode(payload):
    return json.dumps(payload).encode("utf-8")


class TestUnescape:
    def test_quoted_sentinel(self):
        assert unescape_app_message('"listening"') == "listening"

    def test_escaped_json(self):
        assert unescape_app_message('"{\\"type\\":\\"hang\\"}"') == '{"type":"hang"}'

    def test_escaped_backslash(self):
        assert unescape_app_message('"a\\\\b"') == "a\\b"

    def test_unquoted_passthrough(self):
        text = '{"type": "hang"}'
        assert unescape_app_message(text) == text

    def test_single_quote_character_passthrough(self):
        assert unescape_app_message('"') == '"'


class TestSentinel:
    def test_unquoted_listening(self, decoder):
        assert isinstance(decoder.decode(b"listening"), CallStarted)

    def test_quoted_listening(self, decoder):
        assert isinstance(decoder.decode(b'"listening"'), CallStarted)

    def test_json_encoded_listening(self, decoder):
        # Same payload as produced by json.dumps("listening")
        assert isinstance(decoder.decode(encode("listening")), CallStarted)

    def test_sentinel_checked_before_json_parse(self, decoder):
        decoder._read_envelope = None  # would fail if the envelope were read
        assert isinstance(decoder.decode('"listening"'), CallStarted)

    def test_other_plain_text_is_error(self, decoder):
        event = decoder.decode(b'"ready"')
        assert isinstance(event, ErrorEvent)
        assert isinstance(event.error, DecodeError)
        assert event.error.raw_text == '"ready"'


class TestEnvelope:
    def test_handler_table(self, decoder):
        assert set(decoder.handlers) == {
            "transcript",
            "function-call",
            "speech-update",
            "metadata",
            "conversation-update",
            "hang",
            "tool-calls",
        }

    def test_unknown_type(self, decoder, caplog):
        raw = encode({"type": "unknown-foo"})
        with caplog.at_level(logging.ERROR, logger="vapi_client"):
            event = decoder.decode(raw)

        assert isinstance(event, ErrorEvent)
        assert "unknown-foo" in event.error.reason
        assert event.error.raw_text == raw.decode("utf-8")
        assert "unknown-foo" in caplog.text

    def test_missing_type(self, decoder):
        event = decoder.decode(encode({"role": "user"}))
        assert isinstance(event, ErrorEvent)

    def test_non_string_type(self, decoder):
        event = decoder.decode(encode({"type": 7}))
        assert isinstance(event, ErrorEvent)

    def test_malformed_json(self, decoder):
        event = decoder.decode(b'{"type": "hang"')
        assert isinstance(event, ErrorEvent)
        assert event.error.raw_text == '{"type": "hang"'

    def test_json_array(self, decoder):
        event = decoder.decode(b'[{"type": "hang"}]')
        assert isinstance(event, ErrorEvent)

    def test_invalid_utf8(self, decoder):
        event = decoder.decode(b"\xff\xfe\x00")
        assert isinstance(event, ErrorEvent)
        assert event.error.raw_text is not None

    def test_deeply_nested_json(self, decoder):
        raw = b'{"type":"metadata","metadata":' + b"[" * 100000 + b"]" * 100000 + b"}"
        event = decoder.decode(raw)

        assert isinstance(event, ErrorEvent)
        assert isinstance(event.error, DecodeError)
        assert event.error.raw_text == raw.decode("utf-8")

    def test_handler_recursion_is_decode_error(self, decoder):
        def too_deep(message):
            raise RecursionError("maximum recursion depth exceeded")

        decoder.handlers["hang"] = too_deep
        raw = encode({"type": "hang"})
        event = decoder.decode(raw)

        assert isinstance(event, ErrorEvent)
        assert "hang" in event.error.reason
        assert event.error.raw_text == raw.decode("utf-8")

    def test_escaped_json_message(self, decoder):
        raw = json.dumps(json.dumps({"type": "hang"})).encode("utf-8")
        assert isinstance(decoder.decode(raw), Hang)


class TestTypedDispatch:
    def test_transcript(self, decoder):
        event = decoder.decode(
            encode({"type": "transcript", "role": "user", "transcriptType": "final", "transcript": "Hello"})
        )
        assert isinstance(event, TranscriptEvent)
        assert event.transcript.transcript == "Hello"
        assert event.transcript.transcriptType == "final"

    def test_transcript_missing_field(self, decoder):
        event = decoder.decode(encode({"type": "transcript", "role": "user", "transcriptType": "final"}))
        assert isinstance(event, ErrorEvent)
        assert "transcript" in event.error.reason

    def test_function_call(self, decoder):
        event = decoder.decode(
            encode(
                {
                    "type": "function-call",
                    "functionCall": {"name": "lookup", "parameters": {"city": "Paris", "days": 3}},
                }
            )
        )
        assert isinstance(event, FunctionCallEvent)
        assert event.function_call.name == "lookup"
        assert event.function_call.parameters == {"city": "Paris", "days": 3}

    @pytest.mark.parametrize(
        "payload, reason",
        [
            ({"type": "function-call"}, "App message missing functionCall"),
            ({"type": "function-call", "functionCall": {"parameters": {}}}, "App message missing name"),
            ({"type": "function-call", "functionCall": {"name": "f"}}, "App message missing parameters"),
            (
                {"type": "function-call", "functionCall": {"name": "f", "parameters": "{}"}},
                "App message missing parameters",
            ),
            ({"type": "function-call", "name": "f", "parameters": {}}, "App message missing functionCall"),
        ],
    )
    def test_function_call_missing_parts(self, decoder, payload, reason):
        raw = encode(payload)
        event = decoder.decode(raw)
        assert isinstance(event, ErrorEvent)
        assert event.error.reason == reason
        assert event.error.raw_text == raw.decode("utf-8")

    def test_speech_update(self, decoder):
        event = decoder.decode(encode({"type": "speech-update", "status": "stopped", "role": "assistant"}))
        assert isinstance(event, SpeechUpdateEvent)
        assert event.speech_update.status == "stopped"

    def test_metadata(self, decoder):
        event = decoder.decode(encode({"type": "metadata", "metadata": "sideband"}))
        assert isinstance(event, MetadataEvent)
        assert event.metadata.metadata == "sideband"

    def test_hang(self, decoder):
        assert isinstance(decoder.decode(encode({"type": "hang"})), Hang)

    def test_tool_calls_with_object_arguments(self, decoder):
        event = decoder.decode(
            encode(
                {
                    "type": "tool-calls",
                    "toolCalls": [
                        {"id": "t1", "type": "function", "function": {"name": "f", "arguments": {"x": 1}}}
                    ],
                }
            )
        )
        assert isinstance(event, ToolCallsEvent)
        assert event.tool_calls.toolCalls[0].function.arguments == {"x": 1}

    def test_conversation_update_with_tool_calls(self, decoder):
        payload = {
            "type": "conversation-update",
            "conversation": [
                {"role": "system", "content": "S"},
                {
                    "role": "assistant",
                    "content": None,
                    "tool_calls": [
                        {"type": "function", "id": "t1", "function": {"name": "f", "arguments": "{}"}}
                    ],
                },
                {"role": "tool", "tool_call_id": "t1", "content": "R"},
            ],
        }
        event = decoder.decode(encode(payload))

        assert isinstance(event, ConversationUpdateEvent)
        conversation = event.conversation_update.conversation
        assert len(conversation) == 3
        assert len(conversation[1].tool_calls) == 1
        assert conversation[1].tool_calls[0].function.parsed_arguments() == {}
        assert conversation[2].tool_call_id == "t1"

    def test_conversation_update_tool_call_without_function(self, decoder):
        payload = {
            "type": "conversation-update",
            "conversation": [{"role": "assistant", "tool_calls": [{"id": "t1", "type": "function"}]}],
        }
        event = decoder.decode(encode(payload))

        assert isinstance(event, ConversationUpdateEvent)
        assert event.conversation_update.conversation[0].tool_calls[0].function is None

    def test_conversation_update_timestamped_messages(self, decoder):
        payload = {
            "type": "conversation-update",
            "conversation": [{"role": "system", "content": "System message"}],
            "messages": [
                {"role": "system", "message": "System message", "time": 1741093883580, "secondsFromStart": 0},
                {
                    "role": "bot",
                    "message": "Bot message",
                    "time": "1741093885838",
                    "endTime": "1741093886618",
                    "secondsFromStart": 1.8399999,
                    "duration": 780,
                    "source": "",
                },
                {
                    "toolCalls": [
                        {"type": "function", "id": "tool123", "function": {"name": "test_function", "arguments": "{}"}}
                    ],
                    "role": "tool_calls",
                    "message": "",
                    "time": 1741093903823,
                    "secondsFromStart": 15.179,
                },
            ],
            "messagesOpenAIFormatted": [],
        }
        event = decoder.decode(encode(payload))

        assert isinstance(event, ConversationUpdateEvent)
        messages = event.conversation_update.messages
        assert [m.role for m in messages] == ["system", "bot", "tool_calls"]
        assert messages[0].time == 1741093883580.0
        assert messages[1].time == 1741093885838.0
        assert messages[1].endTime == 1741093886618.0
        assert messages[1].duration == 780.0
        assert messages[2].toolCalls[0].id == "tool123"

    def test_conversation_update_bad_time(self, decoder):
        payload = {
            "type": "conversation-update",
            "conversation": [],
            "messages": [{"role": "bot", "time": "yesterday"}],
        }
        event = decoder.decode(encode(payload))
        assert isinstance(event, ErrorEvent)
        assert "conversation-update" in event.error.reason

    def test_decoder_continues_after_error(self, decoder):
        events = [
            decoder.decode(payload)
            for payload in (b"{broken", encode({"type": "hang"}), b"listening")
        ]
        assert [type(e) for e in events] == [ErrorEvent, Hang, CallStarted]
