"""
Constants and configuration values used throughout the application.

This module defines constants that are used across different parts of the client,
providing a centralized location for protocol names and default values and making
it easier to maintain consistent naming throughout the codebase.
"""

# Logger name used throughout the application
LOGGER_NAME = "vapi_client"

# Backend defaults
DEFAULT_HOST = "api.vapi.ai"
LOCALHOST = "localhost"
LOCALHOST_PORT = 3001
WEB_CALL_PATH = "/call/web"
PROVISIONING_TIMEOUT = 30  # seconds

# Username of the remote participant that plays the assistant audio
REMOTE_SPEAKER_USERNAME = "Vapi Speaker"

# Plain-text readiness signal sent by the assistant once it is listening
LISTENING_SENTINEL = "listening"

# Sideband payload acknowledging that the remote speaker is audio-playable
PLAYABLE_ACK_MESSAGE = {"message": "playable"}

# Default type for outbound conversation messages
DEFAULT_OUTBOUND_MESSAGE_TYPE = "add-message"

# Inbound app message type constants
MESSAGE_TYPE_TRANSCRIPT = "transcript"
MESSAGE_TYPE_FUNCTION_CALL = "function-call"
MESSAGE_TYPE_SPEECH_UPDATE = "speech-update"
MESSAGE_TYPE_METADATA = "metadata"
MESSAGE_TYPE_CONVERSATION_UPDATE = "conversation-update"
MESSAGE_TYPE_HANG = "hang"
MESSAGE_TYPE_TOOL_CALLS = "tool-calls"
