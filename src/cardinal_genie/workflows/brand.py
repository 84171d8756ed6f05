"""Brand identity: logo generation and name suggestions."""

import logging
from collections.abc import Callable
from pathlib import Path

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from ..errors import MissingInformation, ParseFailure
from ..llm.models import LogoRequest
from .base import Workflow, require
from .export import save_logo
from .jsonscan import find_json

logger = logging.getLogger(__name__)

LOGO_STYLES = {
    "modern": "Modern & Minimalist",
    "professional": "Professional & Corporate",
    "creative": "Creative & Artistic",
    "tech": "Tech & Futuristic",
    "elegant": "Elegant & Luxury",
    "playful": "Playful & Fun",
}

DEFAULT_COLORS = "professional color palette"


class NameIdeasForm(BaseModel):
    """Inputs for brand-name suggestions."""

    model_config = ConfigDict(frozen=True)

    industry: str = ""
    style: str = "modern"
    keywords: str = ""
    description: str = ""
    count: int = 8


class NameIdea(BaseModel):
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    name: str
    tagline: str = ""


_NAME_IDEAS = TypeAdapter(list[NameIdea])


def parse_name_ideas(text: str) -> list[NameIdea]:
    """Parse the suggestion array out of the model reply.

    Raises:
        ParseFailure: If no array of {name, tagline} objects is found
    """
    try:
        return _NAME_IDEAS.validate_python(find_json(text, "["))
    except (ParseFailure, ValidationError) as e:
        raise ParseFailure("Could not parse name suggestions") from e


def logo_request(
    business_name: str,
    industry: str,
    style: str = "modern",
    colors: str = "",
) -> LogoRequest:
    """Build a logo request, applying the default style and palette.

    Raises:
        MissingInformation: If business name or industry is blank
    """
    missing = [
        name for name, value in (("business_name", business_name), ("industry", industry))
        if not value.strip()
    ]
    if missing:
        raise MissingInformation(missing)
    return LogoRequest(
        business_name=business_name.strip(),
        industry=industry.strip(),
        style=style or "modern",
        colors=colors.strip() or DEFAULT_COLORS,
    )


class BrandWorkflow(Workflow):
    """Generate brand assets for a business."""

    prompt_name = "brand_names"

    def prompt_for(self, form: NameIdeasForm) -> str:
        require(form, ("industry",))
        return self.build_prompt(**form.model_dump())

    async def suggest_names(
        self,
        form: NameIdeasForm,
        on_update: Callable[[str], None] | None = None,
    ) -> list[NameIdea]:
        """Ask the chat endpoint for brand-name ideas."""
        prompt = self.prompt_for(form)
        content = await self._complete(prompt, on_update)
        ideas = parse_name_ideas(content)
        logger.info("Received %d name suggestions", len(ideas))
        return ideas

    async def generate_logo(self, request: LogoRequest, directory: Path | None = None) -> tuple[str, Path | None]:
        """Generate a logo and optionally save it.

        Args:
            request: Logo parameters
            directory: Where to write `<slug>-logo.png`; nothing is saved when None

        Returns:
            (image URL or data URI, saved path or None)

        Raises:
            RequestFailed: If generation or the download fails
            NotImplementedError: If the provider cannot generate images
        """
        logger.info("Generating %s logo for %s", request.style, request.business_name)
        response = await self._provider.generate_logo(request)
        path = None
        if directory is not None:
            path = await save_logo(response.image_url, request.business_name, directory)
        return response.image_url, path
