"""Derivation of the presentation data shown on the ROI page.

Both the on-screen preview and the PDF export render from the ``DerivedView``
returned by :func:`build_view`, so the two documents always agree.
"""
from dataclasses import dataclass
from typing import List, Optional

from .defaults import ReportDefaults, get_defaults
from .records import ImpactCategory, ReportRecord


@dataclass(frozen=True)
class DerivedView:
    record: ReportRecord
    highlights: List[str]
    next_steps: List[str]
    categories: List[ImpactCategory]
    initials: str
    title: str

    @property
    def has_logo(self) -> bool:
        return bool(self.record.company_logo)


def company_initials(name: str) -> str:
    """Initials of the first two words, e.g. 'Acme Corp' -> 'AC'."""
    return ''.join(word[0] for word in name.split(' ') if word).upper()[:2]


def sort_categories(categories: List[ImpactCategory]) -> List[ImpactCategory]:
    # sorted() is stable, ties keep their input order
    return sorted(categories, key=lambda c: c.count, reverse=True)


def _entered(entries: List[str]) -> List[str]:
    return [entry.strip() for entry in entries or [] if entry.strip()]


def auto_highlights(record: ReportRecord, defaults: ReportDefaults) -> List[str]:
    """Highlights generated from the metrics, in fixed priority order."""
    generated = []
    if record.implementation_rate_pct >= defaults.adoption_threshold_pct:
        generated.append(defaults.adoption_highlight)
    if record.prs_with_implemented_suggestions > 0:
        generated.append(defaults.merges_highlight)
    if record.impact_categories:
        top = sort_categories(record.impact_categories)[:2]
        generated.append(defaults.categories_highlight.format(
            categories=' and '.join(c.label for c in top)
        ))
    return generated[:defaults.max_auto_highlights]


def effective_highlights(record: ReportRecord, defaults: ReportDefaults) -> List[str]:
    return _entered(record.highlights) or auto_highlights(record, defaults)


def effective_next_steps(record: ReportRecord, defaults: ReportDefaults) -> List[str]:
    return _entered(record.next_steps) or list(defaults.next_steps)


def build_view(record: ReportRecord, defaults: Optional[ReportDefaults] = None) -> DerivedView:
    defaults = defaults or get_defaults()
    return DerivedView(
        record=record,
        highlights=effective_highlights(record, defaults),
        next_steps=effective_next_steps(record, defaults),
        categories=sort_categories(record.impact_categories),
        initials=company_initials(record.company_name),
        title=defaults.report_title,
    )
