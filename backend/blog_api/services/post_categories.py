"""
Post/category association reconciliation.
"""

import logging
from datetime import datetime
from typing import Iterable

from sqlalchemy.orm import Session

from blog_api.models import Post, PostCategory

logger = logging.getLogger(__name__)


def reconcile_post_categories(db: Session, post: Post, category_ids: Iterable[str]) -> int:
    """
    Make the post's association rows equal to category_ids, replacing any
    existing ones.

    Unknown category ids make the flush fail with a foreign key violation;
    the caller's unit of work rolls everything back in that case.

    Args:
        db: Database session (inside an open unit of work)
        post: Persistent post (already flushed)
        category_ids: Desired category ids, duplicates allowed

    Returns:
        Number of association rows written
    """
    # Delete existing links; "fetch" also evicts loaded link objects from the
    # identity map so the re-inserted (post_id, category_id) keys don't clash
    db.query(PostCategory).filter(PostCategory.post_id == post.id).delete(
        synchronize_session="fetch"
    )

    # Insert new links, deduped, first occurrence wins
    desired = list(dict.fromkeys(category_ids))
    for category_id in desired:
        db.add(PostCategory(post_id=post.id, category_id=category_id))

    # Changing links counts as modifying the post
    post.updated_at = datetime.utcnow()

    db.flush()
    db.expire(post, ["categories"])

    logger.debug(f"Post {post.id} linked to {len(desired)} categories")

    # Don't commit here - let the caller handle the transaction
    return len(desired)
