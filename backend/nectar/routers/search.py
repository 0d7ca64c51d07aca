"""Global search router."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from nectar.database import get_db
from nectar.errors import BadRequestError, InternalError
from nectar.middleware.auth import get_current_user
from nectar.routers.responses import MULTI_STATUS
from nectar.schemas.search import SearchResults
from nectar.services import search_service

router = APIRouter(prefix="/api/search", tags=["search"], dependencies=[Depends(get_current_user)])


@router.get(
    "",
    response_model=SearchResults,
    responses={MULTI_STATUS: {"description": "Partial results; some queries failed"}},
)
def global_search(q: str = Query(""), db: Session = Depends(get_db)):
    """Substring search over users, courses, classes, departments, notices and events."""
    query = q.strip()
    if not query:
        raise BadRequestError("Search query parameter 'q' is required.")

    items, error = search_service.global_search(db, query)
    if error is None:
        return SearchResults(query=query, items=items, count=len(items))
    if not items:
        raise InternalError(error)

    body = SearchResults(query=query, items=items, count=len(items), error=error)
    return JSONResponse(status_code=MULTI_STATUS, content=body.model_dump())
