from datetime import date

from app.infrastructure.observability.logging import get_logger
from app.models.domain.ledger_domain import SuccessStory
from app.repositories.ledger_repository import SuccessStoryRepository
from app.services.errors import InvalidInputError

logger = get_logger(__name__)


class SuccessStoryService:
    def __init__(self, stories: SuccessStoryRepository):
        self.stories = stories

    async def create(
        self,
        *,
        author_email: str,
        self_biodata_id: int,
        partner_biodata_id: int,
        marriage_date: date,
        review: str,
        rating: int,
        couple_image: str | None = None,
    ) -> SuccessStory:
        if not 1 <= rating <= 5:
            raise InvalidInputError("rating must be between 1 and 5", rating=rating)
        if self_biodata_id == partner_biodata_id:
            raise InvalidInputError("A story needs two different biodatas")
        if not review or not review.strip():
            raise InvalidInputError("review is required")

        story = await self.stories.create(
            couple_image=couple_image,
            self_biodata_id=self_biodata_id,
            partner_biodata_id=partner_biodata_id,
            marriage_date=marriage_date,
            review=review.strip(),
            rating=rating,
        )
        logger.info("Success story created", story_id=story.id, author=author_email)
        return story

    async def list_recent(self) -> list[SuccessStory]:
        return await self.stories.list_recent()
