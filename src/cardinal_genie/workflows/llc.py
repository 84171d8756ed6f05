"""LLC formation document generation."""

from collections.abc import Callable

from pydantic import BaseModel, ConfigDict, Field

from .base import Workflow, require
from .export import export_filename

US_STATES = (
    "Alabama", "Alaska", "Arizona", "Arkansas", "California", "Colorado", "Connecticut",
    "Delaware", "Florida", "Georgia", "Hawaii", "Idaho", "Illinois", "Indiana", "Iowa",
    "Kansas", "Kentucky", "Louisiana", "Maine", "Maryland", "Massachusetts", "Michigan",
    "Minnesota", "Mississippi", "Missouri", "Montana", "Nebraska", "Nevada", "New Hampshire",
    "New Jersey", "New Mexico", "New York", "North Carolina", "North Dakota", "Ohio",
    "Oklahoma", "Oregon", "Pennsylvania", "Rhode Island", "South Carolina", "South Dakota",
    "Tennessee", "Texas", "Utah", "Vermont", "Virginia", "Washington", "West Virginia",
    "Wisconsin", "Wyoming",
)

REQUIRED = ("company_name", "state")


def normalize_state(value: str) -> str:
    """Canonical spelling of a U.S. state name, matched case-insensitively.

    Raises:
        ValueError: If value is not one of the 50 states
    """
    wanted = " ".join(value.split()).lower()
    for state in US_STATES:
        if state.lower() == wanted:
            return state
    raise ValueError(f"Unknown U.S. state: {value!r}")


class LLCForm(BaseModel):
    """Answers collected by the LLC formation wizard."""

    model_config = ConfigDict(frozen=True)

    company_name: str = Field(default="", description="Name without the LLC suffix")
    state: str = Field(default="", description="State of formation")
    business_type: str = ""
    owners: str = "1"
    registered_agent: str = ""
    address: str = ""
    purpose: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.company_name.strip()} LLC"


class LLCDocuments(BaseModel):
    """A generated formation package (markdown)."""

    model_config = ConfigDict(frozen=True)

    company: str
    state: str
    content: str

    @property
    def filename(self) -> str:
        return export_filename(self.company, "llc-formation.txt")

    def export_text(self) -> str:
        return self.content


class LLCWorkflow(Workflow):
    """Generate an LLC formation package for one state."""

    prompt_name = "llc"

    def prompt_for(self, form: LLCForm) -> str:
        """Validate the form and render the generation prompt.

        Raises:
            MissingInformation: If company name or state is blank
            ValueError: If the state is not a U.S. state
        """
        require(form, REQUIRED)
        return self.build_prompt(
            company_name=form.display_name,
            state=normalize_state(form.state),
            business_type=form.business_type,
            owners=form.owners,
            registered_agent=form.registered_agent,
            address=form.address,
            purpose=form.purpose,
        )

    async def run(
        self,
        form: LLCForm,
        on_update: Callable[[str], None] | None = None,
    ) -> LLCDocuments:
        prompt = self.prompt_for(form)
        content = await self._complete(prompt, on_update)
        return LLCDocuments(
            company=form.company_name.strip(),
            state=normalize_state(form.state),
            content=content,
        )
