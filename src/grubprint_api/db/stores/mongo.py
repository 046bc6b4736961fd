"""
MongoDB record store.

Each publish writes a fresh set of versioned collections (Food_<v>,
Food_idx_<v>, ...) and then points the "active" document in Meta at
the new version. Readers resolve the version once, so a request never
mixes postings from one load with foods from another.
"""

import logging
import re
from datetime import datetime
from functools import wraps
from typing import Any

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from grubprint_api.core.exceptions import IndexNotBuiltError, StoreReadError
from grubprint_api.db.dataset import FoodDataset
from grubprint_api.models.food import FoodRecord, Nutrient, NutrientDef, Weight

from .base import RecordReader, RecordStore

logger = logging.getLogger(__name__)

META_COLLECTION = "Meta"
ACTIVE_ID = "active"

FOOD = "Food"
FOOD_IDX = "Food_idx"
WEIGHT = "Weight"
NUTRIENT_DATA = "NutrientData"
NUTRIENT_DEF = "NutrientDef"
FOOD_GROUP = "FoodGroup"

COLLECTIONS = (FOOD, FOOD_IDX, WEIGHT, NUTRIENT_DATA, NUTRIENT_DEF, FOOD_GROUP)

INSERT_BATCH_SIZE = 1000

SEQ_ORDER = "seq_number"


def collection_name(base: str, version: str) -> str:
    return f"{base}_{version}"


def _reads(operation: str):
    """Translate driver failures into StoreReadError."""

    def decorator(fn):
        @wraps(fn)
        async def wrapper(*args, **kwargs):
            try:
                return await fn(*args, **kwargs)
            except PyMongoError as e:
                logger.error(f"MongoDB {operation} failed: {e}")
                raise StoreReadError(
                    message=f"Failed to read {operation} from MongoDB: {e}",
                    operation=operation,
                ) from e

        return wrapper

    return decorator


def _prefix_filter(food_id: str) -> dict[str, Any]:
    # Anchored prefix regex is served by the _id index
    return {"_id": {"$regex": f"^{re.escape(food_id)},"}}


def _from_doc(doc: dict[str, Any], id_field: str | None = "id") -> dict[str, Any]:
    doc = dict(doc)
    _id = doc.pop("_id")
    if id_field:
        doc[id_field] = _id
    return doc


class MongoRecordReader(RecordReader):
    """Reader over one published version of the Mongo collections."""

    def __init__(self, db: AsyncIOMotorDatabase, version: str):
        self._db = db
        self.version = version

    def _collection(self, base: str) -> AsyncIOMotorCollection:
        return self._db[collection_name(base, self.version)]

    @_reads("food")
    async def get_food(self, food_id: str) -> FoodRecord | None:
        doc = await self._collection(FOOD).find_one({"_id": food_id})
        if doc is None:
            return None
        return FoodRecord.model_validate(_from_doc(doc))

    @_reads("foods")
    async def get_foods(self, food_ids: list[str]) -> dict[str, FoodRecord]:
        if not food_ids:
            return {}
        cursor = self._collection(FOOD).find({"_id": {"$in": list(food_ids)}})
        docs = await cursor.to_list(length=None)
        return {doc["_id"]: FoodRecord.model_validate(_from_doc(doc)) for doc in docs}

    @_reads("postings")
    async def get_postings(self, gram: str) -> list[str]:
        doc = await self._collection(FOOD_IDX).find_one({"_id": gram}, {"ids": 1})
        if doc is None:
            return []
        return list(doc.get("ids", []))

    @_reads("weights")
    async def weights_by_food_id(self, food_id: str) -> list[Weight]:
        # seq is stored as text; SEQ_ORDER holds it as a number for sorting
        cursor = self._collection(WEIGHT).find(_prefix_filter(food_id)).sort(SEQ_ORDER, 1)
        docs = await cursor.to_list(length=None)
        weights = []
        for doc in docs:
            doc = _from_doc(doc, id_field=None)
            doc.pop(SEQ_ORDER, None)
            weights.append(Weight.model_validate(doc))
        return weights

    @_reads("nutrients")
    async def nutrients_by_food_id(self, food_id: str) -> list[Nutrient]:
        cursor = self._collection(NUTRIENT_DATA).find(_prefix_filter(food_id)).sort("_id", 1)
        data_docs = await cursor.to_list(length=None)
        if not data_docs:
            return []

        def_ids = [doc["nutrient_def_id"] for doc in data_docs]
        def_cursor = self._collection(NUTRIENT_DEF).find({"_id": {"$in": def_ids}})
        defs = {
            doc["_id"]: NutrientDef.model_validate(_from_doc(doc))
            for doc in await def_cursor.to_list(length=None)
        }

        rows = [(defs[doc["nutrient_def_id"]], doc) for doc in data_docs if doc["nutrient_def_id"] in defs]
        rows.sort(key=lambda pair: (pair[0].sort is None, pair[0].sort or 0.0))
        return [
            Nutrient(description=d.description, value=doc["value"], units=d.units)
            for d, doc in rows
        ]


class MongoRecordStore(RecordStore):
    """
    Record store persisted in MongoDB.

    Usage:
        store = MongoRecordStore(connection.get_database())
        await store.open()          # pick up a previously published version
        await store.publish(dataset)
        reader = store.reader()
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self._db = db
        self._version: str | None = None
        self._published_at: datetime | None = None

    @property
    def backend_name(self) -> str:
        return "mongo"

    @property
    def is_ready(self) -> bool:
        return self._version is not None

    @property
    def published_at(self) -> datetime | None:
        return self._published_at

    @property
    def version(self) -> str | None:
        return self._version

    @_reads("active version")
    async def _active(self) -> dict[str, Any] | None:
        return await self._db[META_COLLECTION].find_one({"_id": ACTIVE_ID})

    async def open(self) -> bool:
        """
        Load the active version pointer written by an earlier publish.

        Returns:
            True if a published dataset was found
        """
        meta = await self._active()
        if meta is None:
            logger.warning("No published food dataset found in MongoDB")
            return False
        self._version = meta["version"]
        self._published_at = meta.get("published_at")
        logger.info(f"Using MongoDB food dataset version {self._version}")
        return True

    def reader(self) -> MongoRecordReader:
        version = self._version
        if version is None:
            raise IndexNotBuiltError()
        return MongoRecordReader(self._db, version)

    async def publish(self, dataset: FoodDataset) -> None:
        version = dataset.created_at.strftime("%Y%m%d%H%M%S%f")
        logger.info(f"Writing MongoDB food dataset version {version}")

        await self._insert(FOOD, version, (
            {"_id": food.id, **food.model_dump(exclude={"id"})}
            for food in dataset.foods.values()
        ))
        await self._insert(FOOD_IDX, version, (
            {"_id": gram, "ids": list(ids)}
            for gram, ids in dataset.index.postings.items()
        ))
        await self._insert(WEIGHT, version, (
            {"_id": weight.key, **weight.model_dump(), SEQ_ORDER: weight.seq_number}
            for weights in dataset.weights.values()
            for weight in weights
        ))
        await self._insert(NUTRIENT_DATA, version, (
            {"_id": data.key, **data.model_dump()}
            for rows in dataset.nutrient_data.values()
            for data in rows
        ))
        await self._insert(NUTRIENT_DEF, version, (
            {"_id": d.id, **d.model_dump(exclude={"id"})}
            for d in dataset.nutrient_defs.values()
        ))
        await self._insert(FOOD_GROUP, version, (
            {"_id": g.id, **g.model_dump(exclude={"id"})}
            for g in dataset.food_groups.values()
        ))

        # Keep the version Meta points at; other processes may still serve it
        active = await self._active()
        previous = active["version"] if active is not None else self._version

        await self._db[META_COLLECTION].replace_one(
            {"_id": ACTIVE_ID},
            {"_id": ACTIVE_ID, "version": version, "published_at": dataset.created_at},
            upsert=True,
        )
        self._version = version
        self._published_at = dataset.created_at
        logger.info(f"Published MongoDB food dataset version {version}")

        await self._drop_stale(keep={version, previous})

    async def _insert(self, base: str, version: str, docs) -> None:
        collection = self._db[collection_name(base, version)]
        batch: list[dict[str, Any]] = []
        total = 0
        for doc in docs:
            batch.append(doc)
            if len(batch) >= INSERT_BATCH_SIZE:
                await collection.insert_many(batch, ordered=False)
                total += len(batch)
                batch = []
        if batch:
            await collection.insert_many(batch, ordered=False)
            total += len(batch)
        logger.debug(f"Inserted {total} documents into {collection_name(base, version)}")

    async def _drop_stale(self, keep: set[str | None]) -> None:
        # The previous version is kept so readers created before the
        # swap can finish against it.
        names = await self._db.list_collection_names()
        for name in names:
            for base in COLLECTIONS:
                prefix = f"{base}_"
                if not name.startswith(prefix):
                    continue
                suffix = name[len(prefix):]
                if suffix.isdigit() and suffix not in keep:
                    logger.info(f"Dropping stale collection {name}")
                    await self._db.drop_collection(name)
