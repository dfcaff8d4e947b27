"""letterfeed — turn email newsletters into Atom feeds."""

from .config import FeedConfig, Settings, StorageConfig
from .entry import EntryBuilder
from .feed import FeedDocument
from .inboxes import InboxService
from .logging import setup_logging
from .router import IngestionRouter
from .store import LocalFeedStore, ObjectStore, S3FeedStore, create_store
from .tokens import generate_token
from .truncation import truncate

__all__ = [
    "EntryBuilder",
    "FeedConfig",
    "FeedDocument",
    "InboxService",
    "IngestionRouter",
    "LocalFeedStore",
    "ObjectStore",
    "S3FeedStore",
    "Settings",
    "StorageConfig",
    "create_store",
    "generate_token",
    "setup_logging",
    "truncate",
]
