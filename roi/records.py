"""Report record passed from the form to the preview and export renderers.

The record is never stored. It travels between the browser and the server
as JSON using the camelCase names the front end has always used.
"""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .defaults import get_defaults


class RecordError(Exception):
    """Raised when a serialized report record is missing fields or malformed."""
    pass


@dataclass
class ImpactCategory:
    label: str
    count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {'label': self.label, 'count': self.count}


@dataclass
class ReportRecord:
    company_name: str
    prs_analyzed: int
    implemented_suggestions_count: int
    implementation_rate_pct: float
    company_logo: Optional[str] = None
    report_period_label: str = ''
    generated_by: Optional[str] = None
    prs_with_implemented_suggestions: int = 0
    impact_categories: List[ImpactCategory] = field(default_factory=list)
    highlights: List[str] = field(default_factory=list)
    next_steps: List[str] = field(default_factory=list)
    cta_question: str = ''

    @classmethod
    def from_dict(cls, data: Any) -> 'ReportRecord':
        """Build a record from its JSON wire shape."""
        if not isinstance(data, dict):
            raise RecordError('Report data must be a JSON object.')

        missing = [
            key for key in ('companyName', 'prsAnalyzed',
                            'implementedSuggestionsCount', 'implementationRatePct')
            if data.get(key) is None
        ]
        if missing:
            raise RecordError(f"Missing required fields: {', '.join(missing)}")

        defaults = get_defaults()
        categories = []
        for item in _list(data, 'impactCategories'):
            if not isinstance(item, dict) or not isinstance(item.get('label'), str):
                raise RecordError('Each impact category needs a text label.')
            categories.append(ImpactCategory(
                label=item['label'],
                count=_integer(item.get('count', 0), 'impactCategories.count'),
            ))

        return cls(
            company_name=_text(data['companyName'], 'companyName'),
            company_logo=_optional_text(data.get('companyLogo'), 'companyLogo'),
            report_period_label=_text(
                data.get('reportPeriodLabel') or defaults.report_period_label,
                'reportPeriodLabel',
            ),
            generated_by=_optional_text(data.get('generatedBy'), 'generatedBy'),
            prs_analyzed=_integer(data['prsAnalyzed'], 'prsAnalyzed'),
            prs_with_implemented_suggestions=_integer(
                data.get('prsWithImplementedSuggestions') or 0,
                'prsWithImplementedSuggestions',
            ),
            implemented_suggestions_count=_integer(
                data['implementedSuggestionsCount'], 'implementedSuggestionsCount'
            ),
            implementation_rate_pct=_number(data['implementationRatePct'], 'implementationRatePct'),
            impact_categories=categories,
            highlights=_strings(data, 'highlights'),
            next_steps=_strings(data, 'nextSteps'),
            cta_question=_text(data.get('ctaQuestion') or defaults.cta_question, 'ctaQuestion'),
        )

    @classmethod
    def from_json(cls, raw) -> 'ReportRecord':
        if not raw:
            raise RecordError('Empty request body.')
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise RecordError(f'Invalid JSON: {e}') from e
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'companyName': self.company_name,
            'companyLogo': self.company_logo,
            'reportPeriodLabel': self.report_period_label,
            'generatedBy': self.generated_by,
            'prsAnalyzed': self.prs_analyzed,
            'prsWithImplementedSuggestions': self.prs_with_implemented_suggestions,
            'implementedSuggestionsCount': self.implemented_suggestions_count,
            'implementationRatePct': self.implementation_rate_pct,
            'impactCategories': [c.to_dict() for c in self.impact_categories],
            'highlights': list(self.highlights),
            'nextSteps': list(self.next_steps),
            'ctaQuestion': self.cta_question,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


def _text(value, name: str) -> str:
    if not isinstance(value, str):
        raise RecordError(f'{name} must be text.')
    return value


def _optional_text(value, name: str) -> Optional[str]:
    if value is None:
        return None
    value = _text(value, name)
    return value if value.strip() else None


def _number(value, name: str) -> float:
    # bool is an int subclass; true/false are not metrics
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RecordError(f'{name} must be a number.')
    return value


def _integer(value, name: str) -> int:
    value = _number(value, name)
    if isinstance(value, float):
        if not value.is_integer():
            raise RecordError(f'{name} must be a whole number.')
        value = int(value)
    if value < 0:
        raise RecordError(f'{name} must not be negative.')
    return value


def _list(data: Dict[str, Any], name: str) -> list:
    value = data.get(name)
    if value is None:
        return []
    if not isinstance(value, list):
        raise RecordError(f'{name} must be a list.')
    return value


def _strings(data: Dict[str, Any], name: str) -> List[str]:
    values = _list(data, name)
    if not all(isinstance(v, str) for v in values):
        raise RecordError(f'{name} must be a list of text entries.')
    return values
