"""ETL package - collection sync against the catalog."""

from etl.collection import CollectionSyncEngine, collection_key

__all__ = ["CollectionSyncEngine", "collection_key"]
