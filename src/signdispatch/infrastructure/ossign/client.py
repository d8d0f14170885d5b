"""
OSSign API client implementation.

Infrastructure layer for the remote signing workflow service.
"""

import json
import logging
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError
from requests.exceptions import ConnectionError as RequestsConnectionError
from requests.exceptions import RequestException, Timeout

from signdispatch.domain.exceptions import ProtocolError, RemoteCallError, TransientError
from signdispatch.domain.models import (
    ApiFailure,
    ApiResult,
    ApiSuccess,
    DispatchRequest,
    WorkflowStatus,
)
from signdispatch.shared.types import JsonDict

DEFAULT_API_BASE = 'https://api.ossign.org/api/v1'
DEFAULT_REQUEST_TIMEOUT = 60.0

# Both path shapes select the same status operation
CHECK_ENDPOINTS = ('check', 'status')

# Longest response body quoted in an error message
BODY_EXCERPT_LIMIT = 500


def parse_api_response(data: Any) -> ApiResult:
    """
    Classify a decoded 2xx response body.

    The service sometimes answers 200 with ``{"message": ...}`` instead of
    a workflow snapshot, so the envelope is checked explicitly.

    Raises:
        ProtocolError: If the body is neither an error envelope nor a snapshot
    """
    if not isinstance(data, dict):
        raise ProtocolError(f"Expected a JSON object, got {type(data).__name__}")

    if 'message' in data:
        return ApiFailure(message=str(data['message']))

    try:
        return ApiSuccess(snapshot=WorkflowStatus.model_validate(data))
    except ValidationError as e:
        raise ProtocolError(f"Invalid workflow status payload: {e}") from e


class OSSignClient:
    """
    OSSign API client implementation.

    Uses a requests session carrying the bearer token. Every call is
    a POST that answers with a workflow status snapshot.
    """

    def __init__(
        self,
        token: str,
        api_base: Optional[str] = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        check_endpoint: str = 'check',
        logger: Optional[logging.Logger] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize OSSign client.

        Args:
            token: Bearer token for the account
            api_base: API base URL (default: https://api.ossign.org/api/v1)
            timeout: Per-call timeout in seconds
            check_endpoint: Status path segment, 'check' or 'status'
            logger: Logger instance
            session: Preconfigured requests session
        """
        if not token or not token.strip():
            raise ValueError("token is required")
        if check_endpoint not in CHECK_ENDPOINTS:
            raise ValueError(f"Invalid check endpoint: {check_endpoint}")

        self.api_base = (api_base or DEFAULT_API_BASE).rstrip('/')
        self.timeout = timeout
        self.check_endpoint = check_endpoint
        self.logger = logger or logging.getLogger(__name__)

        self.session = session or requests.Session()
        self.session.headers.update({
            'Accept': 'application/json',
            'Authorization': f'Bearer {token}',
        })

    def __enter__(self) -> "OSSignClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    def _request(
        self,
        endpoint: str,
        payload: Optional[JsonDict] = None
    ) -> requests.Response:
        """
        Send one POST request.

        Raises:
            TransientError: On per-call timeout or dropped connection
            RemoteCallError: On any other transport failure
        """
        url = f"{self.api_base}/{endpoint.lstrip('/')}"

        kwargs: Dict[str, Any] = {'timeout': self.timeout}
        if payload is not None:
            kwargs['headers'] = {'Content-Type': 'application/json'}
            kwargs['data'] = json.dumps(payload)

        try:
            return self.session.request('POST', url, **kwargs)
        except Timeout as e:
            raise TransientError(f"Request to {endpoint} timed out after {self.timeout}s") from e
        except RequestsConnectionError as e:
            raise TransientError(f"Connection to {endpoint} failed: {e}") from e
        except RequestException as e:
            raise RemoteCallError(f"Request to {endpoint} failed: {e}") from e

    def call(
        self,
        endpoint: str,
        payload: Optional[JsonDict] = None
    ) -> WorkflowStatus:
        """
        Call an API operation and return the workflow snapshot.

        Args:
            endpoint: Operation path below the API base
            payload: JSON body, omitted when None

        Returns:
            Parsed workflow status

        Raises:
            RemoteCallError: On non-2xx status or error envelope
            ProtocolError: On a malformed success body
            TransientError: On per-call timeout or dropped connection
        """
        response = self._request(endpoint, payload)

        if not response.ok:
            body = response.text[:BODY_EXCERPT_LIMIT]
            raise RemoteCallError(
                f"{response.status_code} {response.reason} - {body}",
                status_code=response.status_code,
                reason=response.reason,
                body=body,
            )

        self.logger.debug(f"Response from API {endpoint}: {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            raise ProtocolError(f"Response from {endpoint} is not valid JSON") from e

        result = parse_api_response(data)
        if isinstance(result, ApiFailure):
            raise RemoteCallError(result.message, status_code=response.status_code)

        return result.snapshot

    def dispatch(self, username: str, request: DispatchRequest) -> WorkflowStatus:
        """Start a workflow for the account."""
        return self.call(f'dispatch/{username}', request.to_dict())

    def check(self, username: str, workflow_id: str) -> WorkflowStatus:
        """Get the current status of a workflow."""
        return self.call(f'{self.check_endpoint}/{username}/{workflow_id}')
