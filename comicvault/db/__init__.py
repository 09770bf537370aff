from comicvault.db.database import get_session, init_db
from comicvault.db.operations import (
    IssueDraft,
    bulk_create_issues,
    collection_to_model,
    create_collection,
    create_issue,
    delete_collection,
    get_collection,
    get_issue,
    issue_to_model,
    list_collections,
    list_issues,
    require_collection,
    set_issue_owned,
    set_issue_rating,
    toggle_issue_owned,
    update_collection,
)

__all__ = [
    "IssueDraft",
    "bulk_create_issues",
    "collection_to_model",
    "create_collection",
    "create_issue",
    "delete_collection",
    "get_collection",
    "get_issue",
    "get_session",
    "init_db",
    "issue_to_model",
    "list_collections",
    "list_issues",
    "require_collection",
    "set_issue_owned",
    "set_issue_rating",
    "toggle_issue_owned",
    "update_collection",
]
