# snapshare/services/firestore_service.py
import logging
from typing import Any

# Firestore rejects batches with more than 500 writes.
MAX_BATCH_SIZE = 500


def delete_where(db, collection_name: str, field: str, value: Any, batch_size: int = MAX_BATCH_SIZE) -> int:
    """
    Deletes every document of `collection_name` whose `field` equals `value`.

    Documents are fetched and removed in batched writes until the query comes
    back short. Firestore errors are not caught: a failed batch aborts the
    caller's operation.

    :param db: Firestore client
    :param collection_name: collection to clean up (e.g. 'likes')
    :param field: field to filter on (e.g. 'post_id')
    :param value: value the field must equal
    :return: number of deleted documents
    """
    query = db.collection(collection_name).where(field, '==', value)
    deleted = 0
    while True:
        docs = list(query.limit(batch_size).stream())
        if not docs:
            break
        batch = db.batch()
        for doc in docs:
            batch.delete(doc.reference)
        batch.commit()
        deleted += len(docs)
        if len(docs) < batch_size:
            break

    if deleted:
        logging.info(f"Firestore bulk delete (Collection: {collection_name}, {field}={value}): {deleted} documents")
    return deleted
