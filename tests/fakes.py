"""In-memory stand-ins for the record store client."""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from common.exceptions import StoreUnavailableError
from store.schemas import FetchParams, FetchResponse, MutationResponse, RecordResponse, RecordResult

UpdatePredicate = Callable[[str, Dict[str, Any]], bool]


class FakeRecordStore:
    """
    Deterministic record store used by service, controller and manager tests.

    - Assigns increasing integer ids and CreatedOn timestamps
    - Captures every call for assertions
    - Can be told to fail specific creates, updates or deletes
    """

    def __init__(self) -> None:
        self.tables: Dict[str, Dict[int, Dict[str, Any]]] = {}
        self.calls: List[Tuple[str, str, Any]] = []
        self._next_id = 1
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.fail_update_when: Optional[UpdatePredicate] = None
        self.fail_create_names: set = set()
        self.fail_delete_ids: set = set()
        self.unavailable = False

    def seed(self, record_type: str, **fields: Any) -> Dict[str, Any]:
        record = {"Id": self._next_id, "CreatedOn": self._tick(), **fields}
        self.tables.setdefault(record_type, {})[record["Id"]] = record
        self._next_id += 1
        return record

    def _tick(self) -> str:
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def _check_available(self) -> None:
        if self.unavailable:
            raise StoreUnavailableError("Cannot connect to the record store. Is it reachable?")

    def calls_for(self, method: str) -> List[Tuple[str, str, Any]]:
        return [call for call in self.calls if call[0] == method]

    def updates_for(self, record_type: str, record_id: int) -> List[Dict[str, Any]]:
        return [
            record
            for method, rtype, records in self.calls
            if method == "update" and rtype == record_type
            for record in records
            if record["Id"] == record_id
        ]

    async def fetch_records(self, record_type: str, params: FetchParams) -> FetchResponse:
        self.calls.append(("fetch", record_type, params))
        self._check_available()
        records = list(self.tables.get(record_type, {}).values())
        for condition in params.where or []:
            records = [r for r in records if r.get(condition.field_name) in condition.values]
        records.sort(key=lambda r: r["CreatedOn"], reverse=True)
        if params.paging_info is not None:
            start = params.paging_info.offset
            records = records[start:start + params.paging_info.limit]
        return FetchResponse(data=[dict(r) for r in records] or None)

    async def get_record_by_id(self, record_type: str, record_id: int, params: FetchParams) -> RecordResponse:
        self.calls.append(("get", record_type, record_id))
        self._check_available()
        record = self.tables.get(record_type, {}).get(record_id)
        return RecordResponse(data=dict(record) if record else None)

    async def create_record(self, record_type: str, records: List[Dict[str, Any]]) -> MutationResponse:
        self.calls.append(("create", record_type, records))
        self._check_available()
        results = []
        for fields in records:
            if fields.get("Name") in self.fail_create_names:
                results.append(RecordResult(
                    success=False,
                    errors=[{"fieldLabel": "Name", "message": "rejected by store"}],
                ))
                continue
            results.append(RecordResult(success=True, data=dict(self.seed(record_type, **fields))))
        return MutationResponse(success=True, results=results)

    async def update_record(self, record_type: str, records: List[Dict[str, Any]]) -> MutationResponse:
        self.calls.append(("update", record_type, records))
        self._check_available()
        results = []
        for fields in records:
            if self.fail_update_when is not None and self.fail_update_when(record_type, fields):
                results.append(RecordResult(success=False, message=f"Update of record {fields['Id']} failed"))
                continue
            record = self.tables.get(record_type, {}).get(fields["Id"])
            if record is None:
                results.append(RecordResult(success=False, message=f"Record {fields['Id']} does not exist"))
                continue
            record.update(fields)
            results.append(RecordResult(success=True, data=dict(record)))
        return MutationResponse(success=True, results=results)

    async def delete_record(self, record_type: str, record_ids: List[int]) -> MutationResponse:
        self.calls.append(("delete", record_type, record_ids))
        self._check_available()
        results = []
        for record_id in record_ids:
            if record_id in self.fail_delete_ids:
                results.append(RecordResult(success=False, message=f"Record {record_id} is locked"))
                continue
            self.tables.get(record_type, {}).pop(record_id, None)
            results.append(RecordResult(success=True))
        return MutationResponse(success=True, results=results)

    async def close(self) -> None:
        pass
