"""HTTP client for the hosted record store."""

import uuid
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel

from common.exceptions import StoreRequestError, StoreUnavailableError
from common.logging_config import get_logger
from store.config import StoreConfig
from store.schemas import FetchParams, FetchResponse, MutationResponse, RecordResponse

logger = get_logger(__name__)

ResponseModel = TypeVar("ResponseModel", bound=BaseModel)


class RecordStoreClient:
    """
    Async HTTP client for the record store API.

    Every call is a single attempt: failures are raised to the caller, which
    decides whether to invoke the operation again.
    """

    STATUS_MESSAGES = {
        400: 'Bad request',
        401: 'Not authenticated with the record store',
        403: 'Access forbidden',
        404: 'Record type or record not found',
        409: 'Conflicting update',
        422: 'Invalid record data',
        429: 'Too many requests',
        500: 'Record store error',
        502: 'Bad gateway',
        503: 'Record store unavailable',
        504: 'Record store timed out',
    }

    def __init__(self, config: StoreConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize record store client.

        Args:
            config: Store connection configuration
            transport: Optional httpx transport (used to substitute a mock transport in tests)
        """
        self.config = config
        self.session = httpx.AsyncClient(
            base_url=config.get_base_url(),
            timeout=config.get_timeout(),
            headers=config.get_headers(),
            transport=transport,
        )
        self.request_id: Optional[str] = None
        logger.info(f"Initialized RecordStoreClient [base_url={config.get_base_url()}]")

    async def __aenter__(self) -> "RecordStoreClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _request(self, method: str, endpoint: str, payload: Dict[str, Any]) -> httpx.Response:
        """
        Send one request to the store.

        Args:
            method: HTTP method
            endpoint: API endpoint path
            payload: JSON body

        Returns:
            HTTP response with a 2xx status

        Raises:
            StoreUnavailableError: If the store cannot be reached or times out
            StoreRequestError: If the store answers with an error status
        """
        self.request_id = str(uuid.uuid4())
        headers = {'X-Request-ID': self.request_id}

        logger.debug(f"Making request: {method} {endpoint} [request_id={self.request_id}]")

        try:
            response = await self.session.request(method, endpoint, json=payload, headers=headers)
        except httpx.ConnectError as e:
            logger.error(f"Connection error: {method} {endpoint} error={e} [request_id={self.request_id}]")
            raise StoreUnavailableError("Cannot connect to the record store. Is it reachable?") from e
        except httpx.TimeoutException as e:
            logger.error(f"Timeout: {method} {endpoint} [request_id={self.request_id}]")
            raise StoreUnavailableError("Request to the record store timed out.") from e
        except httpx.HTTPError as e:
            logger.error(f"Transport error: {method} {endpoint} error={e} [request_id={self.request_id}]")
            raise StoreUnavailableError(f"Record store request failed: {e}") from e

        logger.debug(
            f"Response received: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
        )

        if response.status_code >= 400:
            logger.warning(
                f"Store error: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
            )
            raise StoreRequestError(self._format_error(response), status_code=response.status_code)

        return response

    def _format_error(self, response: httpx.Response) -> str:
        """
        Map an error response to a readable message.

        Args:
            response: HTTP response object

        Returns:
            The store's own message when it sent one, else a message for the status code
        """
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict):
            detail = body.get('message') or body.get('detail')
            if detail:
                return str(detail)

        return self.STATUS_MESSAGES.get(response.status_code, f"Unexpected status {response.status_code}")

    def _parse(self, response: httpx.Response, model: Type[ResponseModel]) -> ResponseModel:
        try:
            return model.model_validate(response.json())
        except ValueError as e:
            logger.error(f"Malformed store response for {model.__name__} [request_id={self.request_id}]: {e}")
            raise StoreRequestError(
                "Malformed response from the record store",
                status_code=response.status_code,
            ) from e

    async def fetch_records(self, record_type: str, params: FetchParams) -> FetchResponse:
        """
        Fetch records of one type.

        Args:
            record_type: Record type name (e.g., "task_c")
            params: Field selection, filters, ordering and paging

        Returns:
            Parsed fetch response
        """
        response = await self._request('POST', f'/records/{record_type}/query', params.to_payload())
        return self._parse(response, FetchResponse)

    async def get_record_by_id(self, record_type: str, record_id: int, params: FetchParams) -> RecordResponse:
        """
        Fetch a single record.

        Args:
            record_type: Record type name
            record_id: Integer record id
            params: Field selection

        Returns:
            Parsed response; its data is None when the record does not exist
        """
        response = await self._request(
            'POST', f'/records/{record_type}/{int(record_id)}/query', params.to_payload()
        )
        return self._parse(response, RecordResponse)

    async def create_record(self, record_type: str, records: List[Dict[str, Any]]) -> MutationResponse:
        response = await self._request('POST', f'/records/{record_type}', {'records': records})
        return self._parse(response, MutationResponse)

    async def update_record(self, record_type: str, records: List[Dict[str, Any]]) -> MutationResponse:
        response = await self._request('PUT', f'/records/{record_type}', {'records': records})
        return self._parse(response, MutationResponse)

    async def delete_record(self, record_type: str, record_ids: List[int]) -> MutationResponse:
        response = await self._request(
            'DELETE', f'/records/{record_type}', {'RecordIds': [int(rid) for rid in record_ids]}
        )
        return self._parse(response, MutationResponse)

    async def close(self) -> None:
        """Close the HTTP session."""
        await self.session.aclose()
