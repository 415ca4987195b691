from fastapi import APIRouter, Depends

from notegraph.api.deps import get_service
from notegraph.api.schemas import SearchResponse
from notegraph.database import schemas
from notegraph.services.graph_service import KnowledgeGraphService

router = APIRouter(
    prefix="/api/search",
    tags=["search"],
)


@router.get("", response_model=SearchResponse)
async def search_notes(q: str = "", service: KnowledgeGraphService = Depends(get_service)):
    """
    Case-insensitive substring match on title, content or tags.
    """
    results = await service.search(q)
    return SearchResponse(results=[schemas.Note.model_validate(n) for n in results], total=len(results))
