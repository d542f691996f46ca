import logging
import sys
from datetime import date
from typing import Callable, Optional

import structlog
from pymongo.database import Database

from books import BookManagementService
from checkout import CheckoutService
from config import Settings, get_settings
from database import get_db
from facade import LibraryFacade
from members import MemberService
from notifications import LoggingNotificationSink, NotificationSink, NullNotificationSink
from reports import ReportService
from repositories import BookStore, MemberStore, MongoBookStore, MongoMemberStore
from search import BookSearchService

# ----------------------
# Logging
# ----------------------

def configure_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=settings.LOG_LEVEL)

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.LOG_JSON
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# ----------------------
# Wiring
# ----------------------

def build_library(
    book_store: BookStore,
    member_store: MemberStore,
    notifier: NotificationSink,
    today: Callable[[], date] = date.today,
) -> LibraryFacade:
    books = BookManagementService(book_store)
    members = MemberService(member_store)
    return LibraryFacade(
        books=books,
        members=members,
        checkout=CheckoutService(books, members, notifier, today=today),
        search=BookSearchService(book_store, today=today),
        reports=ReportService(books, members, today=today),
        notifier=notifier,
        today=today,
    )


def create_library(settings: Optional[Settings] = None, db: Optional[Database] = None) -> LibraryFacade:
    """Library backed by MongoDB, configured from the environment."""
    settings = settings or get_settings()
    if db is None:
        db = get_db(settings)

    book_store = MongoBookStore(db, settings.BOOK_COLLECTION)
    member_store = MongoMemberStore(db, settings.MEMBER_COLLECTION)
    book_store.ensure_indexes()
    member_store.ensure_indexes()

    notifier = LoggingNotificationSink() if settings.NOTIFICATIONS_ENABLED else NullNotificationSink()
    return build_library(book_store, member_store, notifier)
