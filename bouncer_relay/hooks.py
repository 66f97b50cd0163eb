# bouncer_relay/hooks.py
"""
Post-mutation hooks - decide which events reach the bouncer.

createComment: every new comment is forwarded.
createFlag: only the first flag on a comment that moderation has not
already acted on is forwarded.

Both hooks hand the mutation result back untouched, whatever happens.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol

from .logging import get_logger
from .models import (
    COMMENTS_ITEM_TYPE,
    UNACTIONED_STATUSES,
    Comment,
    Flag,
    NotificationPayload,
    NotificationSource,
    read_field,
)
from .settings import Settings
from .webhooks import BouncerDispatcher

logger = get_logger(__name__)


class CommentLoader(Protocol):
    """Request-scoped, cached comment lookup owned by the host."""

    def load(self, comment_id: str) -> Awaitable[Optional[Any]]:
        ...


@dataclass
class HookContext:
    """Per-request context handed to hooks by the host."""
    comments: CommentLoader
    extra: Dict[str, Any] = field(default_factory=dict)


def is_first_flag(comment: Comment) -> bool:
    """True when the comment had no flags before this one."""
    return comment.flag_count == 0


def is_unactioned(comment: Comment) -> bool:
    """True when every status so far is ACCEPTED or NONE (empty history included)."""
    return all(entry.type in UNACTIONED_STATUSES for entry in comment.status_history)


def _comment_loader(ctx: Any) -> CommentLoader:
    """Find the comment loader on a host context."""
    loaders = read_field(ctx, "loaders")
    if loaders is not None:
        return read_field(loaders, "comments")
    return read_field(ctx, "comments")


class BouncerHooks:
    """Event filter for the createComment and createFlag mutations."""

    def __init__(self, settings: Settings, dispatcher: BouncerDispatcher):
        self.settings = settings
        self.dispatcher = dispatcher

    async def on_comment_created(self, obj, args, ctx, info, result):
        """Forward a newly created comment."""
        if not self.settings.delivery_enabled:
            return result

        comment = read_field(result, "comment")
        comment_id = read_field(comment, "id")
        if comment_id is None:
            logger.debug("comment_skipped", reason="no_comment_in_result")
            return result

        self.dispatcher.schedule(
            NotificationPayload(id=str(comment_id), source=NotificationSource.COMMENT)
        )
        return result

    async def on_flag_created(self, obj, args, ctx, info, result):
        """Forward the first flag on a comment that has not been moderated yet."""
        if not self.settings.delivery_enabled:
            return result

        try:
            payload = await self._flag_payload(ctx, result)
        except Exception as e:
            # The flag mutation must succeed even if the relay cannot decide
            logger.exception("flag_hook_failed", error=str(e))
            return result

        if payload is not None:
            self.dispatcher.schedule(payload)
        return result

    async def _flag_payload(self, ctx, result) -> Optional[NotificationPayload]:
        raw_flag = read_field(result, "flag")
        if raw_flag is None:
            logger.debug("flag_skipped", reason="no_flag_in_result")
            return None

        flag = Flag.from_host(raw_flag)
        if flag.item_type != COMMENTS_ITEM_TYPE:
            logger.debug("flag_skipped", reason="not_a_comment", item_type=flag.item_type)
            return None

        raw_comment = await _comment_loader(ctx).load(flag.item_id)
        if raw_comment is None:
            logger.debug("flag_skipped", reason="comment_not_found", comment_id=flag.item_id)
            return None

        comment = Comment.from_host(raw_comment)

        if not is_first_flag(comment):
            logger.debug(
                "flag_skipped",
                reason="not_first_flag",
                comment_id=comment.id,
                flag_count=comment.flag_count,
            )
            return None

        if not is_unactioned(comment):
            logger.debug("flag_skipped", reason="already_moderated", comment_id=comment.id)
            return None

        return NotificationPayload(id=comment.id, source=NotificationSource.FLAG)

    @property
    def registry(self) -> Dict[str, Dict[str, Dict[str, Callable]]]:
        """Hooks keyed the way the host pipeline registers them."""
        return {
            "RootMutation": {
                "createComment": {"post": self.on_comment_created},
                "createFlag": {"post": self.on_flag_created},
            },
        }
