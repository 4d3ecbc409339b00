"""
Session controller for a single web call.

This module implements the call lifecycle on top of the provisioning client and
a caller-supplied transport:

    idle -> provisioning -> joining -> active -> leaving -> idle

Any failure moves the session to ``failed`` and immediately back to ``idle`` so a
new call can be started. The state field is the single source of truth and is
only read and written under one lock; network and transport I/O always happen
outside it. Control errors (AlreadyInCall, NoCallInProgress, EncodeError) are
raised to the caller, while asynchronous failures are published on the event bus
as ErrorEvent.
"""

import asyncio
import json
import logging
import threading
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict

from vapi_client.app_message_decoder import AppMessageDecoder
from vapi_client.config.constants import (
    DEFAULT_OUTBOUND_MESSAGE_TYPE,
    LOGGER_NAME,
    PLAYABLE_ACK_MESSAGE,
)
from vapi_client.config.settings import Configuration
from vapi_client.errors import (
    AlreadyInCall,
    EncodeError,
    NoCallInProgress,
    ProvisioningFailed,
    TransportJoinFailed,
    TransportLeaveFailed,
    VapiError,
)
from vapi_client.event_bus import EventBus
from vapi_client.models.events import CallEnded, CallStarted, ErrorEvent
from vapi_client.models.web_call import (
    ArtifactPlan,
    OutboundMessage,
    WebCallRequest,
    WebCallResponse,
)
from vapi_client.services.provisioning_client import ProvisioningClient
from vapi_client.services.transport import (
    BROADCAST_ALL,
    CallStateChanged,
    CallTransport,
    InboundDataMessage,
    ParticipantJoined,
    ParticipantUpdated,
    TransportEvent,
    should_acknowledge_readiness,
)

logger = logging.getLogger(LOGGER_NAME)

PLAYABLE_ACK = json.dumps(PLAYABLE_ACK_MESSAGE).encode("utf-8")


class SessionState(str, Enum):
    IDLE = "idle"
    PROVISIONING = "provisioning"
    JOINING = "joining"
    ACTIVE = "active"
    LEAVING = "leaving"
    FAILED = "failed"


class CallSession(BaseModel):
    """The pending or active call owned by a controller."""

    model_config = ConfigDict(validate_assignment=True)

    id: Optional[str] = None
    web_call_url: Optional[str] = None
    artifact_plan: Optional[ArtifactPlan] = None
    state: SessionState = SessionState.PROVISIONING


class CallController:
    """
    Drives one call at a time and publishes what happens on an event bus.

    The embedding application calls the control methods (start, stop, send,
    set_muted) and forwards every transport notification to
    ``handle_transport_event``.
    """

    def __init__(
        self,
        configuration: Configuration,
        transport: CallTransport,
        provisioning_client: Optional[ProvisioningClient] = None,
        event_bus: Optional[EventBus] = None,
        decoder: Optional[AppMessageDecoder] = None,
    ):
        self.configuration = configuration
        self.transport = transport
        self.provisioning_client = provisioning_client or ProvisioningClient(configuration)
        self.event_bus = event_bus or EventBus()
        self.decoder = decoder or AppMessageDecoder()

        self._lock = threading.RLock()
        self._state = SessionState.IDLE
        self._session: Optional[CallSession] = None
        self._muted = False

        self.transport_handlers: Dict[str, Callable[[Any], Awaitable[None]]] = {
            "participant-joined": self._handle_participant,
            "participant-updated": self._handle_participant,
            "call-state-changed": self._handle_call_state_changed,
            "inbound-data-message": self._handle_inbound_data_message,
        }

    # State

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def current_session(self) -> Optional[CallSession]:
        with self._lock:
            return self._session.model_copy() if self._session else None

    @property
    def is_muted(self) -> bool:
        with self._lock:
            return self._muted

    def _set_state(self, new_state: SessionState) -> None:
        # Caller holds self._lock
        logger.info(f"Call state: {self._state.value} -> {new_state.value}")
        self._state = new_state
        if self._session is not None:
            self._session.state = new_state

    def _transition(
        self,
        expected: Union[SessionState, Iterable[SessionState]],
        new_state: SessionState,
    ) -> bool:
        """Move to ``new_state`` if the current state is one of ``expected``."""
        if isinstance(expected, SessionState):
            expected = (expected,)
        with self._lock:
            if self._state not in expected:
                return False
            self._set_state(new_state)
            return True

    def _reset(self) -> None:
        # Caller holds self._lock
        self._set_state(SessionState.IDLE)
        self._session = None
        self._muted = False

    def _fail(self, error: VapiError, expected: Iterable[SessionState]) -> bool:
        """Move to failed and back to idle, then publish the error.

        Nothing happens if the session already left ``expected``, so a failure
        racing another failure is only reported once.
        """
        with self._lock:
            if self._state not in expected:
                logger.debug(f"Ignoring {type(error).__name__} in state {self._state.value}: {error}")
                return False
            self._set_state(SessionState.FAILED)
            self._reset()

        logger.error(f"Call failed: {error}")
        self.event_bus.publish(ErrorEvent(error=error))
        return True

    def _require_active(self) -> None:
        if self.state != SessionState.ACTIVE:
            raise NoCallInProgress()

    # Control operations

    async def start(
        self,
        assistant_id: Optional[str] = None,
        assistant: Optional[Dict[str, Any]] = None,
        metadata: Optional[Dict[str, Any]] = None,
        assistant_overrides: Optional[Dict[str, Any]] = None,
    ) -> Optional[WebCallResponse]:
        """
        Provision a web call and join it.

        Args:
            assistant_id: Identifier of a saved assistant
            assistant: Inline assistant definition, instead of ``assistant_id``
            metadata: Metadata attached to the call
            assistant_overrides: Per-call overrides of the assistant settings

        Returns:
            The web call response once the call is active, or None if
            provisioning or joining failed (the failure is published as an
            ErrorEvent)

        Raises:
            ValueError: If not exactly one of ``assistant_id`` and ``assistant`` is given
            AlreadyInCall: If a call is already pending or active
        """
        if (assistant_id is None) == (assistant is None):
            raise ValueError("Exactly one of assistant_id or assistant is required")

        request = WebCallRequest(
            assistantId=assistant_id,
            assistant=assistant,
            metadata=metadata or {},
            assistantOverrides=assistant_overrides or {},
        )

        with self._lock:
            if self._state != SessionState.IDLE:
                raise AlreadyInCall()
            self._session = CallSession()
            self._muted = False
            self._set_state(SessionState.PROVISIONING)

        try:
            web_call = await self.provisioning_client.create_web_call(request)
        except asyncio.CancelledError:
            self._fail(ProvisioningFailed("Web call creation was cancelled"), (SessionState.PROVISIONING,))
            raise
        except VapiError as e:
            self._fail(e, (SessionState.PROVISIONING,))
            return None
        except Exception as e:
            self._fail(ProvisioningFailed(f"Unable to create web call: {e}"), (SessionState.PROVISIONING,))
            return None

        with self._lock:
            if not self._transition(SessionState.PROVISIONING, SessionState.JOINING):
                logger.warning(f"Call {web_call.id} provisioned after the session ended, not joining")
                return None
            self._session.id = web_call.id
            self._session.web_call_url = web_call.webCallUrl
            self._session.artifact_plan = web_call.artifactPlan

        try:
            await self.transport.join(web_call.webCallUrl)
        except asyncio.CancelledError:
            self._fail(TransportJoinFailed("Joining the call was cancelled"), (SessionState.JOINING,))
            raise
        except Exception as e:
            self._fail(TransportJoinFailed(f"Failed to join call: {e}"), (SessionState.JOINING,))
            return None

        if not self._transition(SessionState.JOINING, SessionState.ACTIVE):
            logger.warning(f"Call {web_call.id} joined after the session ended")
            return None

        logger.info(f"Successfully joined call {web_call.id}")
        self.event_bus.publish(CallStarted())
        return web_call

    async def stop(self) -> None:
        """
        Leave the active call.

        Ignored unless a call is active. The session returns to idle when the
        transport reports that it has left, or right away if leaving fails.
        """
        if not self._transition(SessionState.ACTIVE, SessionState.LEAVING):
            logger.warning(f"Ignoring stop while call is {self.state.value}")
            return

        try:
            await self.transport.leave()
        except asyncio.CancelledError:
            if self._fail(TransportLeaveFailed("Leaving the call was cancelled"), (SessionState.LEAVING,)):
                self.event_bus.publish(CallEnded())
            raise
        except Exception as e:
            if self._fail(TransportLeaveFailed(f"Failed to leave call: {e}"), (SessionState.LEAVING,)):
                self.event_bus.publish(CallEnded())

    async def send(self, message: OutboundMessage) -> None:
        """
        Send an app message to every participant of the active call.

        Raises:
            NoCallInProgress: If no call is active
            EncodeError: If the message cannot be serialized
        """
        self._require_active()
        try:
            data = message.model_dump_json().encode("utf-8")
        except (ValueError, TypeError) as e:
            raise EncodeError(f"Error encoding message to JSON: {e}")

        logger.debug(f"Sending app message: {data.decode('utf-8')}")
        await self.transport.send_data(data, BROADCAST_ALL)

    async def send_text(
        self, role: str, content: str, type: str = DEFAULT_OUTBOUND_MESSAGE_TYPE
    ) -> None:
        await self.send(OutboundMessage.create(type=type, role=role, content=content))

    async def set_muted(self, muted: bool) -> None:
        """
        Mute or unmute the local microphone.

        Raises:
            NoCallInProgress: If no call is active
        """
        self._require_active()
        await self.transport.set_microphone_enabled(not muted)
        with self._lock:
            self._muted = muted
        logger.info("Audio muted" if muted else "Audio unmuted")

    async def toggle_muted(self) -> bool:
        """Flip the mute state and return the new value."""
        self._require_active()
        muted = not self.is_muted
        await self.set_muted(muted)
        return muted

    # Audio levels

    async def start_local_audio_level_observer(self) -> None:
        self._require_active()
        await self.transport.start_local_audio_level_observer()

    async def start_remote_participants_audio_level_observer(self) -> None:
        self._require_active()
        await self.transport.start_remote_participants_audio_level_observer()

    @property
    def local_audio_level(self) -> Optional[float]:
        if self.state != SessionState.ACTIVE:
            return None
        return self.transport.local_audio_level

    @property
    def remote_audio_level(self) -> Optional[float]:
        if self.state != SessionState.ACTIVE:
            return None
        return self.transport.remote_audio_level

    # Transport notifications

    async def handle_transport_event(self, event: TransportEvent) -> None:
        """Consume one notification from the transport."""
        handler = self.transport_handlers.get(event.type)
        if handler is None:
            logger.warning(f"Unhandled transport event: {event.type}")
            return
        await handler(event)

    async def _handle_participant(
        self, event: Union[ParticipantJoined, ParticipantUpdated]
    ) -> None:
        if not should_acknowledge_readiness(event.participant):
            return
        if self.state not in (SessionState.JOINING, SessionState.ACTIVE):
            return

        logger.info("Remote speaker is playable, acknowledging")
        try:
            await self.transport.send_data(PLAYABLE_ACK, BROADCAST_ALL)
        except Exception as e:
            logger.error(f"Error sending playable acknowledgement: {e}")

    async def _handle_call_state_changed(self, event: CallStateChanged) -> None:
        if event.state == "joined":
            logger.info("Transport joined call")
            return
        if event.state != "left":
            logger.debug(f"Transport call state: {event.state}")
            return

        with self._lock:
            state = self._state
            if state in (SessionState.LEAVING, SessionState.ACTIVE):
                self._reset()

        if state in (SessionState.LEAVING, SessionState.ACTIVE):
            logger.info("Successfully left call")
            self.event_bus.publish(CallEnded())
        elif state in (SessionState.PROVISIONING, SessionState.JOINING):
            self._fail(
                TransportJoinFailed("Transport left the call before it became active"),
                (SessionState.PROVISIONING, SessionState.JOINING),
            )

    async def _handle_inbound_data_message(self, event: InboundDataMessage) -> None:
        self.event_bus.publish(self.decoder.decode(event.data))
