"""
Services module for the collaborators the call controller talks to.

Key components:
- provisioning_client: Creates web calls through the backend REST API using
  requests, off the event loop.
- transport: The abstract CallTransport the application implements, the
  notification events it reports, and the readiness handshake predicate.
"""

# Services module initialization
