"""
Vapi web call client - call session controller and app message decoder

This package manages the lifecycle of one real-time voice call with a Vapi
assistant and turns the JSON app messages the assistant sends over the call's
data channel into a typed, ordered stream of events.

Architecture Overview:
- A provisioning client creates the web call over the REST API
- A caller-supplied transport joins the returned room and carries audio and data
- A controller guards the call lifecycle with a small state machine
- A decoder turns inbound app messages into events
- An event bus delivers lifecycle and decoded events to the application

Key Components:
- call_controller: Session state machine and control operations (start, stop, send, mute)
- app_message_decoder: Unescaping, sentinel detection and type dispatch of app messages
- event_bus: Ordered multi-subscriber event delivery
- config: Connection settings, constants, and logging setup
- handlers: One decode handler per app message type
- models: Pydantic models for app messages, events and the web call API
- services: Provisioning client and the transport boundary

Getting Started:
1. Set up environment variables (or a .env file):
   - VAPI_PUBLIC_KEY: Your public API key
   - VAPI_HOST: Backend host (default api.vapi.ai)
   - LOG_LEVEL: Logging level (default INFO)

2. Wire a transport and start a call:
   ```python
   from vapi_client import CallController, Configuration

   controller = CallController(Configuration.from_env(), transport=my_transport)
   controller.event_bus.subscribe(print)
   await controller.start(assistant_id="your-assistant-id")
   ```
"""

from vapi_client.app_message_decoder import AppMessageDecoder
from vapi_client.call_controller import CallController, CallSession, SessionState
from vapi_client.config.settings import Configuration
from vapi_client.event_bus import EventBus, Subscription

__all__ = [
    "AppMessageDecoder",
    "CallController",
    "CallSession",
    "Configuration",
    "EventBus",
    "SessionState",
    "Subscription",
]
