"""Investor pitch deck generation."""

import logging
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from ..errors import ParseFailure
from .base import Workflow, require
from .export import export_filename, format_slides
from .jsonscan import find_json

logger = logging.getLogger(__name__)

REQUIRED = ("company_name", "problem", "solution")


class PitchDeckForm(BaseModel):
    """Inputs for a pitch deck."""

    model_config = ConfigDict(frozen=True)

    company_name: str = ""
    industry: str = ""
    problem: str = ""
    solution: str = ""
    funding_goal: str = ""
    stage: str = ""


class Slide(BaseModel):
    """One slide; `content` is assistant markdown that may embed blocks."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    title: str
    content: str = ""


_SLIDES = TypeAdapter(list[Slide])


class PitchDeck(BaseModel):
    model_config = ConfigDict(frozen=True)

    company: str
    slides: list[Slide]

    @property
    def filename(self) -> str:
        return export_filename(self.company, "pitch-deck.txt")

    def export_text(self) -> str:
        return format_slides([(slide.title, slide.content) for slide in self.slides])


def parse_slides(text: str) -> list[Slide]:
    """Parse the slide array out of the model reply.

    Raises:
        ParseFailure: If no array is found, it is empty, or a slide lacks a title
    """
    try:
        slides = _SLIDES.validate_python(find_json(text, "["))
    except (ParseFailure, ValidationError) as e:
        raise ParseFailure("Could not parse pitch deck") from e
    if not slides:
        raise ParseFailure("Could not parse pitch deck: no slides")
    return slides


class PitchDeckWorkflow(Workflow):
    """Generate an eight-slide investor pitch deck."""

    prompt_name = "pitch_deck"

    def prompt_for(self, form: PitchDeckForm) -> str:
        require(form, REQUIRED)
        return self.build_prompt(**form.model_dump())

    async def run(
        self,
        form: PitchDeckForm,
        on_update: Callable[[str], None] | None = None,
    ) -> PitchDeck:
        """Generate the deck.

        Raises:
            MissingInformation: If company, problem or solution is blank
            RequestFailed: If the completion request fails
            ParseFailure: If the reply holds no usable slide array
        """
        prompt = self.prompt_for(form)
        content = await self._complete(prompt, on_update)
        slides = parse_slides(content)
        logger.info("Pitch deck for %s parsed: %d slides", form.company_name, len(slides))
        return PitchDeck(company=form.company_name.strip(), slides=slides)
