"""Business plan generation.

The model is asked for a JSON object with eight sections. While the reply
streams, progress is estimated from its length, since section boundaries
are not visible until the JSON is complete.
"""

import logging
import math
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from ..errors import ParseFailure
from .base import Workflow, require
from .export import export_filename, format_sections
from .jsonscan import find_json

logger = logging.getLogger(__name__)

REQUIRED = ("business_name", "industry", "business_model")

# Expected reply length used for progress estimation
EXPECTED_LENGTH = 4000

SECTION_TITLES = (
    ("executive_summary", "Executive Summary", "EXECUTIVE SUMMARY"),
    ("company_description", "Company Description", "COMPANY DESCRIPTION"),
    ("market_analysis", "Market Analysis", "MARKET ANALYSIS"),
    ("organization", "Organization & Management", "ORGANIZATION & MANAGEMENT"),
    ("product_service", "Products & Services", "PRODUCTS & SERVICES"),
    ("marketing", "Marketing Strategy", "MARKETING STRATEGY"),
    ("financials", "Financial Projections", "FINANCIAL PROJECTIONS"),
    ("appendix", "Appendix", "APPENDIX"),
)


def section_progress(length: int) -> int:
    """Index (0-7) of the section presumed to be in progress."""
    return min(math.floor(length / EXPECTED_LENGTH * len(SECTION_TITLES)), len(SECTION_TITLES) - 1)


def section_label(index: int) -> str:
    return SECTION_TITLES[index][1]


class BusinessPlanForm(BaseModel):
    """Inputs for a business plan."""

    model_config = ConfigDict(frozen=True)

    business_name: str = ""
    industry: str = ""
    business_model: str = Field(default="", description="e.g. B2B SaaS, marketplace")
    target_market: str = ""
    description: str = ""
    funding: str = ""


class BusinessPlan(BaseModel):
    """The eight sections of a generated plan."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    executive_summary: str = ""
    company_description: str = ""
    market_analysis: str = ""
    organization: str = ""
    product_service: str = ""
    marketing: str = ""
    financials: str = ""
    appendix: str = ""

    def sections(self) -> list[tuple[str, str]]:
        """(display title, text) pairs in plan order."""
        return [(title, getattr(self, field)) for field, title, _ in SECTION_TITLES]

    def export_text(self, business_name: str) -> str:
        return format_sections(
            f"BUSINESS PLAN: {business_name.upper()}",
            [(heading, getattr(self, field)) for field, _, heading in SECTION_TITLES],
        )


def parse_business_plan(text: str) -> BusinessPlan:
    """Parse the plan object out of the model reply.

    Raises:
        ParseFailure: If no object is found or it does not match the plan shape
    """
    try:
        return BusinessPlan.model_validate(find_json(text, "{"))
    except (ParseFailure, ValidationError) as e:
        raise ParseFailure("Could not parse business plan") from e


class BusinessPlanWorkflow(Workflow):
    """Generate a structured business plan."""

    prompt_name = "business_plan"

    def prompt_for(self, form: BusinessPlanForm) -> str:
        """Validate the form and render the generation prompt.

        Raises:
            MissingInformation: If name, industry or business model is blank
        """
        require(form, REQUIRED)
        return self.build_prompt(**form.model_dump())

    async def run(
        self,
        form: BusinessPlanForm,
        on_progress: Callable[[int], None] | None = None,
    ) -> BusinessPlan:
        """Generate the plan.

        Args:
            form: Plan inputs
            on_progress: Called with the section index after every delta

        Raises:
            MissingInformation: If required fields are blank
            RequestFailed: If the completion request fails
            ParseFailure: If the reply holds no usable plan
        """
        prompt = self.prompt_for(form)

        def _update(value: str) -> None:
            if on_progress is not None:
                on_progress(section_progress(len(value)))

        content = await self._complete(prompt, _update)
        plan = parse_business_plan(content)
        logger.info("Business plan for %s parsed", form.business_name)
        return plan

    @staticmethod
    def filename(form: BusinessPlanForm) -> str:
        return export_filename(form.business_name, "business-plan.txt")
