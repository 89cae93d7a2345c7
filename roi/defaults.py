"""Default values and fixed copy used when building the ROI page."""
from dataclasses import dataclass, fields, replace
from typing import Tuple

from django.conf import settings


@dataclass(frozen=True)
class ReportDefaults:
    report_period_label: str = 'Last 14 days'
    cta_question: str = (
        'Does this align with what you are seeing? '
        'What is missing to make this standard for the team?'
    )
    next_steps: Tuple[str, ...] = (
        'Reduce noise and focus on rules with higher return',
        'Define team baseline to standardize what is "must-fix"',
    )
    adoption_highlight: str = 'Value signal: the team is applying suggestions in the merge flow.'
    merges_highlight: str = 'Kodus already influenced real merges (PRs with registered action).'
    categories_highlight: str = 'Main impact categories: {categories}.'
    adoption_threshold_pct: float = 40
    max_auto_highlights: int = 2
    max_user_entries: int = 3
    filename_prefix: str = 'Kodus-Impacto'
    report_title: str = 'Kodus Observed Impact'


DEFAULTS = ReportDefaults()


def get_defaults() -> ReportDefaults:
    """Return the defaults with ROI_REPORT_DEFAULTS overrides applied."""
    overrides = getattr(settings, 'ROI_REPORT_DEFAULTS', None) or {}
    known = {f.name for f in fields(ReportDefaults)}
    unknown = set(overrides) - known
    if unknown:
        raise ValueError(f"Unknown ROI_REPORT_DEFAULTS keys: {', '.join(sorted(unknown))}")
    if 'next_steps' in overrides:
        overrides = dict(overrides, next_steps=tuple(overrides['next_steps']))
    return replace(DEFAULTS, **overrides)
