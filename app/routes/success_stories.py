from fastapi import APIRouter, Depends, status

from app.dependencies import get_caller, get_success_story_service
from app.models.api.ledger_request import SuccessStoryCreateRequest
from app.models.api.ledger_response import SuccessStoryListResponse
from app.models.domain.ledger_domain import SuccessStory
from app.models.domain.user_domain import Caller
from app.services.success_story_service import SuccessStoryService

router = APIRouter(prefix="/success-stories", tags=["success-stories"])


@router.get("", response_model=SuccessStoryListResponse)
async def list_success_stories(service: SuccessStoryService = Depends(get_success_story_service)):
    return SuccessStoryListResponse(stories=await service.list_recent())


@router.post("", response_model=SuccessStory, status_code=status.HTTP_201_CREATED)
async def create_success_story(
    body: SuccessStoryCreateRequest,
    caller: Caller = Depends(get_caller),
    service: SuccessStoryService = Depends(get_success_story_service),
):
    return await service.create(author_email=caller.email, **body.model_dump())
