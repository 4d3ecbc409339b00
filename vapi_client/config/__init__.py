"""
Configuration module for the call client.

Key components:
- constants: Protocol names, default host and other fixed values shared
  across modules.
- logging_config: Console and rotating-file logging for the client logger.
- settings: The Configuration model (host and public key), loadable from the
  environment or a .env file.

Usage examples:
```python
from vapi_client.config.logging_config import configure_logging
from vapi_client.config.settings import Configuration

logger = configure_logging()
configuration = Configuration.from_env()
logger.info(f"Using host {configuration.host}")
```
"""

# Config module initialization
