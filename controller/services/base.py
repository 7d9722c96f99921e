"""Request construction and response unwrapping shared by the record services."""

from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from pydantic import ValidationError as SchemaValidationError

from common.constants import DEFAULT_PAGE_SIZE
from common.exceptions import RecordNotFoundError, StoreError, StoreRequestError
from common.logging_config import get_logger
from controller.models.records import StoreRecord
from store.client import RecordStoreClient
from store.schemas import FetchParams, FieldSpec, MutationResponse, OrderBy, PagingInfo, RecordResult, WhereCondition

logger = get_logger(__name__)

RecordT = TypeVar("RecordT", bound=StoreRecord)


class RecordService(Generic[RecordT]):
    """
    CRUD for one record type through the store client.

    Subclasses name the record type, a label used in messages, the field
    allow-list requested on reads, and the model records are parsed into.
    """

    record_type: str
    label: str
    fields: Sequence[str]
    model: Type[RecordT]

    def __init__(self, client: RecordStoreClient):
        self.client = client

    def _fetch_params(
        self,
        fields: Optional[Sequence[str]] = None,
        where: Optional[List[WhereCondition]] = None,
        paged: bool = True,
    ) -> FetchParams:
        if not paged:
            return FetchParams(fields=[FieldSpec.of(name) for name in fields or self.fields])
        return FetchParams(
            fields=[FieldSpec.of(name) for name in fields or self.fields],
            where=where,
            order_by=[OrderBy(field_name="CreatedOn", sort_type="DESC")],
            paging_info=PagingInfo(limit=DEFAULT_PAGE_SIZE, offset=0),
        )

    def _to_model(self, data: Dict[str, Any]) -> RecordT:
        try:
            return self.model.model_validate(data)
        except SchemaValidationError as e:
            raise StoreRequestError(
                f"Malformed {self.record_type} record from store ({e.error_count()} invalid field(s))"
            ) from e

    def _unwrap(self, response: MutationResponse, action: str) -> List[RecordResult]:
        """
        Return the successful per-record results of a mutation.

        Raises:
            StoreRequestError: If the call failed as a whole or any record in it failed
        """
        if not response.success:
            raise StoreRequestError(response.message or f"Failed to {action} {self.label.lower()}")

        results = response.results or []
        failed = [r for r in results if not r.success]
        if failed:
            logger.error(f"Failed to {action} {len(failed)} {self.record_type} record(s)")
            first = failed[0]
            errors = [str(err) for err in first.errors]
            message = errors[0] if errors else first.message or f"Failed to {action} {self.label.lower()}"
            raise StoreRequestError(message, errors=errors)

        return [r for r in results if r.success]

    async def fetch(
        self,
        where: Optional[List[WhereCondition]] = None,
        fields: Optional[Sequence[str]] = None,
    ) -> List[RecordT]:
        """
        Fetch the first page of records, newest first.

        Returns:
            Parsed records; an empty list when the store has none
        """
        try:
            response = await self.client.fetch_records(self.record_type, self._fetch_params(fields, where))
            if not response.data:
                return []
            return [self._to_model(record) for record in response.data]
        except StoreError as e:
            logger.error(f"Error fetching {self.record_type} records: {e}")
            raise

    async def get_all(self) -> List[RecordT]:
        return await self.fetch()

    async def get_by_id(self, record_id: int) -> RecordT:
        """
        Fetch one record.

        Raises:
            RecordNotFoundError: If the store returns no data for the id
        """
        try:
            response = await self.client.get_record_by_id(
                self.record_type, int(record_id), self._fetch_params(paged=False)
            )
        except StoreError as e:
            logger.error(f"Error fetching {self.record_type} {record_id}: {e}")
            raise

        if not response.data:
            raise RecordNotFoundError(f"{self.label} with ID {record_id} not found")
        return self._to_model(response.data)

    async def _create(self, fields: Dict[str, Any]) -> RecordT:
        try:
            response = await self.client.create_record(self.record_type, [fields])
            successful = self._unwrap(response, "create")
        except StoreError as e:
            logger.error(f"Error creating {self.record_type} record: {e}")
            raise

        if not successful or successful[0].data is None:
            raise StoreRequestError(f"Store did not return the created {self.label.lower()}")
        return self._to_model(successful[0].data)

    async def _update(self, record_id: int, fields: Dict[str, Any]) -> Optional[RecordT]:
        try:
            response = await self.client.update_record(self.record_type, [{"Id": int(record_id), **fields}])
            successful = self._unwrap(response, "update")
        except StoreError as e:
            logger.error(f"Error updating {self.record_type} {record_id}: {e}")
            raise

        if successful and successful[0].data:
            return self._to_model(successful[0].data)
        return None

    async def delete(self, record_id: int) -> bool:
        """
        Delete one record.

        Returns:
            True once the store confirms the deletion

        Raises:
            StoreError: If the store reports the deletion failed
        """
        try:
            response = await self.client.delete_record(self.record_type, [int(record_id)])
            successful = self._unwrap(response, "delete")
        except StoreError as e:
            logger.error(f"Error deleting {self.record_type} {record_id}: {e}")
            raise

        logger.info(f"Deleted {self.record_type} {record_id}")
        return bool(successful) or response.results is None
