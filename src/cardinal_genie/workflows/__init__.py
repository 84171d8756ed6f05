"""Guided document-generation workflows.

Module structure (each module hides a design decision):
- base.py: Form validation and single-prompt completion
- jsonscan.py: Locating JSON values in free-form model output
- export.py: Plain-text export layouts and logo saving
- llc.py, business_plan.py, pitch_deck.py, brand.py: One workflow each
"""

from .brand import BrandWorkflow, NameIdea, NameIdeasForm, logo_request, parse_name_ideas
from .business_plan import (
    BusinessPlan,
    BusinessPlanForm,
    BusinessPlanWorkflow,
    parse_business_plan,
    section_label,
    section_progress,
)
from .export import export_filename, save_logo, slugify, write_export
from .jsonscan import find_json
from .llc import US_STATES, LLCDocuments, LLCForm, LLCWorkflow, normalize_state
from .pitch_deck import PitchDeck, PitchDeckForm, PitchDeckWorkflow, Slide, parse_slides

__all__ = [
    "BrandWorkflow",
    "BusinessPlan",
    "BusinessPlanForm",
    "BusinessPlanWorkflow",
    "LLCDocuments",
    "LLCForm",
    "LLCWorkflow",
    "NameIdea",
    "NameIdeasForm",
    "PitchDeck",
    "PitchDeckForm",
    "PitchDeckWorkflow",
    "Slide",
    "US_STATES",
    "export_filename",
    "find_json",
    "logo_request",
    "normalize_state",
    "parse_business_plan",
    "parse_name_ideas",
    "parse_slides",
    "save_logo",
    "section_label",
    "section_progress",
    "slugify",
    "write_export",
]
