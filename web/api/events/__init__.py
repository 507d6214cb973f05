"""Events API."""

from web.api.events.views import (
    CREATOR_TOKEN_HEADER,
    add_game,
    create_event,
    delete_event,
    get_event,
    list_user_events,
    remove_game,
    rename_event,
    vote,
)

__all__ = [
    "CREATOR_TOKEN_HEADER",
    "create_event",
    "get_event",
    "list_user_events",
    "rename_event",
    "delete_event",
    "add_game",
    "remove_game",
    "vote",
]
