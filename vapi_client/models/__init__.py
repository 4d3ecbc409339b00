"""
Models module for the data structures exchanged with the assistant and the backend.

Key components:
- wire_value: Generic JSON value used where the payload shape is not fixed.
- message_schemas: Pydantic models for inbound app messages, including the
  tolerant decoding of numeric fields.
- events: Immutable events published on the event bus.
- web_call: Provisioning request/response and outbound app messages.

Usage examples:
```python
from vapi_client.models.message_schemas import ConversationUpdate

update = ConversationUpdate.model_validate(payload)
for message in update.conversation:
    print(message.role, message.content)
```
"""

from vapi_client.models.events import (
    CallEnded,
    CallStarted,
    ConversationUpdateEvent,
    ErrorEvent,
    Event,
    FunctionCallEvent,
    Hang,
    MetadataEvent,
    SpeechUpdateEvent,
    ToolCallsEvent,
    TranscriptEvent,
)
from vapi_client.models.message_schemas import (
    AppMessageEnvelope,
    ConversationUpdate,
    FunctionCall,
    Message,
    Metadata,
    SpeechUpdate,
    TimestampedMessage,
    ToolCall,
    ToolCalls,
    ToolFunction,
    Transcript,
)
from vapi_client.models.web_call import (
    ArtifactPlan,
    OutboundMessage,
    WebCallRequest,
    WebCallResponse,
)
