"""
Handlers module for inbound app messages.

Each handler in app_message_handlers maps one app message type to the event
it produces. The AppMessageDecoder routes messages to them by their ``type``
field; handlers are plain functions and can also be called directly:

```python
from vapi_client.handlers.app_message_handlers import handle_transcript

event = handle_transcript({"role": "user", "transcriptType": "final", "transcript": "Hi"})
```
"""

# Handlers module initialization
