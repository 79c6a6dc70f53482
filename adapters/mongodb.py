from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING, MongoClient

from adapters.base import DatabaseAdapter, InvalidIdentifierError, InvalidRequestError, strip_generated_id
from adapters.operations import Operation

LOG = logging.getLogger(__name__)


def to_object_id(value: Any) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError) as exc:
        raise InvalidIdentifierError(f"Invalid document id: {value!r}") from exc


def to_plain(value: Any) -> Any:
    """Make a BSON document JSON friendly (ObjectIds become strings)."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {key: to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]
    return value


class MongoDBAdapter(DatabaseAdapter):
    engine = "mongodb"
    default_port = 27017

    def __init__(self, source_config: Optional[Dict[str, Any]] = None, connect_timeout_ms: int = 5000):
        super().__init__(source_config)
        self.connect_timeout_ms = connect_timeout_ms
        self._client = self._connect()
        self._db = self._client[self._db_params()["database"]]

    def _connect(self):
        params = self._db_params()
        LOG.info(
            "Opening MongoDB client for mongodb://%s:[masked]@%s:%s/%s",
            params["user"],
            params["host"],
            params["port"],
            params["database"],
        )
        return MongoClient(
            host=params["host"],
            port=params["port"],
            username=params["user"] or None,
            password=params["password"] or None,
            authSource="admin",
            connectTimeoutMS=self.connect_timeout_ms,
            serverSelectionTimeoutMS=self.connect_timeout_ms,
        )

    def _collection(self, name: str):
        return self._db[name]

    def build_criteria(self, columns: Sequence[str], search: Optional[str], filters: Mapping[str, Any]) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        if search and columns:
            pattern = re.escape(search)
            query["$or"] = [{column: {"$regex": pattern, "$options": "i"}} for column in columns]
        for column, value in filters.items():
            if column == "_id" and isinstance(value, str):
                value = to_object_id(value)
            query[column] = value
        return query

    def list_targets(self) -> List[str]:
        return list(self._db.list_collection_names())

    def close(self) -> None:
        self._client.close()
        LOG.info("MongoDB connection closed")

    def _find(self, operation: Operation) -> List[Dict[str, Any]]:
        opts = operation.options
        if opts.limit == 0:
            # pymongo treats limit(0) as "no limit"
            return []
        cursor = self._collection(operation.target).find(opts.criteria or {})
        if opts.sort:
            cursor = cursor.sort(opts.sort, DESCENDING if opts.order.upper() == "DESC" else ASCENDING)
        if opts.offset:
            cursor = cursor.skip(opts.offset)
        if opts.limit is not None:
            cursor = cursor.limit(opts.limit)
        return [to_plain(doc) for doc in cursor]

    def _insert(self, operation: Operation) -> List[Dict[str, Any]]:
        document = strip_generated_id(operation.values, "_id")
        result = self._collection(operation.target).insert_one(document)
        return [{"insertedId": str(result.inserted_id)}]

    def _update(self, operation: Operation) -> List[Dict[str, Any]]:
        object_id = to_object_id(operation.record_id)
        updates = {key: value for key, value in operation.values.items() if key != "_id"}
        if not updates:
            raise InvalidRequestError("No fields provided for update")
        result = self._collection(operation.target).update_one({"_id": object_id}, {"$set": updates})
        return [{"affectedRows": result.matched_count}]

    def _delete(self, operation: Operation) -> List[Dict[str, Any]]:
        object_ids = [to_object_id(value) for value in operation.ids]
        if not object_ids:
            return [{"deletedCount": 0}]
        result = self._collection(operation.target).delete_many({"_id": {"$in": object_ids}})
        return [{"deletedCount": result.deleted_count}]

    def _count(self, operation: Operation) -> List[Dict[str, Any]]:
        total = self._collection(operation.target).count_documents(operation.options.criteria or {})
        return [{"total": int(total)}]

    def _describe(self, operation: Operation) -> List[Dict[str, Any]]:
        document = self._collection(operation.target).find_one()
        if not document:
            return []
        return [{"column_name": key, "data_type": type(value).__name__} for key, value in document.items()]
