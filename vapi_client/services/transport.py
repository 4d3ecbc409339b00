"""
Boundary between the call controller and the real-time transport.

The transport (media negotiation, data channel, participant roster) is provided
by the embedding application. It implements ``CallTransport`` and reports what
happens on the call by passing the event objects defined here to
``CallController.handle_transport_event``.
"""

from abc import ABC, abstractmethod
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from vapi_client.config.constants import REMOTE_SPEAKER_USERNAME

# Addressing mode for outbound data messages: every connected participant
BROADCAST_ALL = "all"


class Participant(BaseModel):
    """Roster entry as reported by the transport."""

    model_config = ConfigDict(frozen=True)

    id: str
    username: Optional[str] = None
    microphone_state: Optional[str] = Field(
        None, description="Media state of the microphone track, e.g. 'playable'"
    )
    local: bool = False


class ParticipantJoined(BaseModel):
    type: Literal["participant-joined"] = "participant-joined"
    participant: Participant


class ParticipantUpdated(BaseModel):
    type: Literal["participant-updated"] = "participant-updated"
    participant: Participant


class CallStateChanged(BaseModel):
    type: Literal["call-state-changed"] = "call-state-changed"
    state: Literal["joining", "joined", "leaving", "left"]


class InboundDataMessage(BaseModel):
    type: Literal["inbound-data-message"] = "inbound-data-message"
    data: bytes
    from_participant: Optional[str] = None


TransportEvent = Union[
    ParticipantJoined,
    ParticipantUpdated,
    CallStateChanged,
    InboundDataMessage,
]


def should_acknowledge_readiness(participant: Participant) -> bool:
    """
    Whether ``participant`` is the remote speaker and can now play audio.

    The controller answers this condition with a ``{"message": "playable"}``
    app message.
    """
    return (
        participant.microphone_state == "playable"
        and participant.username == REMOTE_SPEAKER_USERNAME
    )


class CallTransport(ABC):
    """Primitives the call controller needs from the real-time transport.

    Every method raises on failure; the controller translates the exception
    into the matching error event.
    """

    @abstractmethod
    async def join(self, url: str) -> None:
        """Join the room at ``url`` with the microphone on and the camera off."""

    @abstractmethod
    async def leave(self) -> None:
        """Leave the current room."""

    @abstractmethod
    async def send_data(self, data: bytes, target: str = BROADCAST_ALL) -> None:
        """Send an app message over the data channel."""

    @abstractmethod
    async def set_microphone_enabled(self, enabled: bool) -> None:
        """Enable or disable the local microphone input."""

    async def start_local_audio_level_observer(self) -> None:
        raise NotImplementedError("Transport does not report local audio levels")

    async def start_remote_participants_audio_level_observer(self) -> None:
        raise NotImplementedError("Transport does not report remote audio levels")

    @property
    def local_audio_level(self) -> Optional[float]:
        return None

    @property
    def remote_audio_level(self) -> Optional[float]:
        return None
