from typing import Any, Awaitable, Callable, Dict, List, Optional
import structlog

logger = structlog.get_logger()

PageFetcher = Callable[[int, int], Awaitable[Optional[Dict[str, Any]]]]

DEFAULT_PAGE_SIZE = 50


async def paginate(
    fetch_page: PageFetcher,
    items_key: str = "values",
    page_size: int = DEFAULT_PAGE_SIZE,
    **log_context: Any,
) -> List[Dict[str, Any]]:
    """Walk a ``startAt``/``maxResults`` paged endpoint to completion.

    ``fetch_page(start_at, max_results)`` returns the decoded page or ``None``.
    Paging stops on ``isLast``; without it, once the accumulated count reaches
    ``total``. A page that is empty, or carries neither marker, ends the walk.
    The offset advances by the page's own ``maxResults`` so server-side page
    size overrides are honoured.
    """
    items: List[Dict[str, Any]] = []
    start_at = 0
    page_number = 0

    while True:
        page = await fetch_page(start_at, page_size)
        if not page:
            logger.warning("Empty page response, stopping pagination", start_at=start_at, **log_context)
            break

        page_number += 1
        values = page.get(items_key) or []
        items.extend(values)

        total = page.get("total")
        is_last = page.get("isLast")
        logger.info(
            "Fetched page",
            page=page_number,
            fetched=len(values),
            accumulated=len(items),
            total=total,
            **log_context,
        )

        if is_last is not None:
            has_more = not is_last
        else:
            has_more = total is not None and len(items) < total

        if not has_more or not values:
            break

        returned_max = page.get("maxResults") or len(values)
        start_at += returned_max

    return items


async def collect_board_sprints(
    fetch_sprint_page: Callable[[str, int, int], Awaitable[Optional[Dict[str, Any]]]],
    board_id: str,
    project_key: Optional[str] = None,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> List[Dict[str, Any]]:
    """Fetch every sprint of a board; ``project_key`` only tags the log lines."""

    async def _fetch(start_at: int, max_results: int) -> Optional[Dict[str, Any]]:
        return await fetch_sprint_page(board_id, start_at, max_results)

    logger.info("Starting paginated sprint fetch", board_id=board_id, project_key=project_key)
    sprints = await paginate(
        _fetch,
        items_key="values",
        page_size=page_size,
        board_id=board_id,
        project_key=project_key,
    )
    logger.info("Fetched all sprints", board_id=board_id, project_key=project_key, count=len(sprints))
    return sprints
