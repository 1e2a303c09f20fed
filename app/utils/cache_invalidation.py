"""Cache keys and invalidation for catalog reads"""
from typing import List
import logging

from app.schemas.course import CatalogFilters, CatalogScope
from app.utils.cache import delete_pattern

logger = logging.getLogger(__name__)

CATALOG_PREFIX = "catalog"

def catalog_cache_key(filters: CatalogFilters, scope: CatalogScope, page: int, size: int) -> str:
    """Key covering every input of a catalog read, so two different reads never share an entry"""
    category_ids = ",".join(str(i) for i in sorted(set(filters.category_ids or [])))
    difficulty = filters.difficulty.value if filters.difficulty else ""
    return (
        f"{CATALOG_PREFIX}:{scope.visibility.value}:{scope.user_id or ''}"
        f":title={(filters.title or '').lower()}:categories={category_ids}"
        f":difficulty={difficulty}:subscribed={int(filters.subscribed_only)}"
        f":page={page}:size={size}"
    )

class CacheInvalidator:
    """Centralized cache invalidation for data consistency"""

    @staticmethod
    def invalidate_catalog():
        """Drop every cached catalog page; fired on course, category and subscription mutations"""
        deleted_count = _delete_cache_patterns([f"{CATALOG_PREFIX}:*"])
        logger.info(f"Invalidated {deleted_count} catalog cache entries")

def _delete_cache_patterns(patterns: List[str]) -> int:
    """Helper to delete multiple cache patterns"""
    deleted_count = 0
    for pattern in patterns:
        try:
            deleted_count += delete_pattern(pattern)
        except Exception as e:
            logger.warning(f"Failed to delete cache pattern {pattern}: {e}")
    return deleted_count

# Convenience instance
cache_invalidator = CacheInvalidator()
