"""
HTTP client that provisions web calls on the backend.

This module builds the ``POST /call/web`` request, runs it with ``requests`` in
a worker thread so the event loop is never blocked, and decodes the response
into a WebCallResponse. Network errors, non-2xx statuses and undecodable
bodies are all raised as ProvisioningFailed so the controller can publish them.
"""

import asyncio
import json
import logging
from typing import Dict, Optional

import requests
from pydantic import ValidationError

from vapi_client.config.constants import LOGGER_NAME, PROVISIONING_TIMEOUT, WEB_CALL_PATH
from vapi_client.config.settings import Configuration
from vapi_client.errors import ProvisioningFailed
from vapi_client.models.web_call import WebCallRequest, WebCallResponse
from vapi_client.models.wire_value import to_wire_value

logger = logging.getLogger(LOGGER_NAME)


class ProvisioningClient:
    """
    Client for creating web calls through the backend REST API.
    """

    def __init__(
        self,
        configuration: Configuration,
        session: Optional[requests.Session] = None,
        timeout: float = PROVISIONING_TIMEOUT,
    ):
        """
        Initialize the provisioning client.

        Args:
            configuration: Host and public key to use
            session: Optional requests session (a new one is created otherwise)
            timeout: Request timeout in seconds
        """
        self.configuration = configuration
        self.session = session or requests.Session()
        self.timeout = timeout

    def build_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.configuration.public_key}",
            "Content-Type": "application/json",
        }

    def build_body(self, request: WebCallRequest) -> bytes:
        """
        Serialize the request body.

        Raises:
            EncodeError: If metadata or overrides hold values with no JSON form
        """
        body = to_wire_value(request.to_body())
        return json.dumps(body).encode("utf-8")

    async def create_web_call(self, request: WebCallRequest) -> WebCallResponse:
        """
        Create a web call and return the room to join.

        Args:
            request: Assistant reference plus optional metadata and overrides

        Returns:
            The decoded response, including the join URL

        Raises:
            InvalidConfiguration: If the configured host is malformed
            EncodeError: If the request body cannot be serialized
            ProvisioningFailed: On network errors, non-2xx responses or bad bodies
        """
        url = self.configuration.make_url(WEB_CALL_PATH)
        data = self.build_body(request)

        logger.info(f"Creating web call at {url}")
        try:
            response = await asyncio.to_thread(
                self.session.post,
                url,
                headers=self.build_headers(),
                data=data,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Web call request failed: {e}")
            raise ProvisioningFailed(f"Unable to create web call: {e}")

        if not 200 <= response.status_code < 300:
            logger.error(f"Web call request returned HTTP {response.status_code}: {response.text}")
            raise ProvisioningFailed(
                "Unable to create web call",
                status_code=response.status_code,
                response_text=response.text,
            )

        try:
            web_call = WebCallResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Could not decode web call response: {e}")
            raise ProvisioningFailed(
                f"Unable to decode web call response: {e}",
                status_code=response.status_code,
                response_text=response.text,
            )

        logger.info(f"Web call created: {web_call.id}")
        return web_call

    def close(self) -> None:
        self.session.close()
