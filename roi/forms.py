import base64

from django import forms

from .defaults import get_defaults
from .records import ImpactCategory, ReportRecord

MAX_LOGO_SIZE = 2 * 1024 * 1024


def file_to_data_url(uploaded_file) -> str:
    """Encode an uploaded image as a data URL that can be embedded in the report."""
    content_type = getattr(uploaded_file, 'content_type', None) or 'application/octet-stream'
    uploaded_file.seek(0)
    encoded = base64.b64encode(uploaded_file.read()).decode('ascii')
    return f'data:{content_type};base64,{encoded}'


def split_lines(value: str):
    return [line.strip() for line in (value or '').splitlines() if line.strip()]


class ReportRecordForm(forms.Form):
    """Form collecting the usage metrics of one ROI page"""
    company_name = forms.CharField(
        max_length=200,
        error_messages={'required': 'Company name is required'},
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Ex: Acme Corp'})
    )
    logo_file = forms.FileField(
        required=False,
        widget=forms.FileInput(attrs={'class': 'form-control', 'accept': 'image/*'})
    )
    company_logo = forms.CharField(
        required=False,
        help_text='Or paste the logo URL',
        widget=forms.URLInput(attrs={
            'class': 'form-control',
            'placeholder': 'https://company.com/logo.png'
        })
    )
    report_period_label = forms.CharField(
        max_length=200,
        error_messages={'required': 'Report period is required'},
        widget=forms.TextInput(attrs={
            'class': 'form-control',
            'placeholder': 'Ex: Last 14 days or Jan 1 2026 - Jan 15 2026'
        })
    )
    generated_by = forms.CharField(
        required=False,
        max_length=200,
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Your name'})
    )
    prs_analyzed = forms.IntegerField(
        min_value=1,
        error_messages={
            'required': 'PRs analyzed must be greater than 0',
            'invalid': 'PRs analyzed must be greater than 0',
            'min_value': 'PRs analyzed must be greater than 0',
        },
        widget=forms.NumberInput(attrs={'class': 'form-control', 'min': '1'})
    )
    prs_with_implemented_suggestions = forms.IntegerField(
        required=False,
        min_value=0,
        widget=forms.NumberInput(attrs={'class': 'form-control', 'min': '0'})
    )
    implemented_suggestions_count = forms.IntegerField(
        min_value=0,
        error_messages={
            'required': 'Required field',
            'invalid': 'Required field',
            'min_value': 'Must be 0 or more',
        },
        widget=forms.NumberInput(attrs={'class': 'form-control', 'min': '0'})
    )
    implementation_rate_pct = forms.FloatField(
        min_value=0,
        max_value=100,
        error_messages={
            'required': 'Must be between 0 and 100',
            'invalid': 'Must be between 0 and 100',
            'min_value': 'Must be between 0 and 100',
            'max_value': 'Must be between 0 and 100',
        },
        widget=forms.NumberInput(attrs={'class': 'form-control', 'min': '0', 'max': '100', 'step': 'any'})
    )
    highlights = forms.CharField(
        required=False,
        help_text='One per line. If left blank, they will be generated automatically based on metrics.',
        widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 3})
    )
    next_steps = forms.CharField(
        required=False,
        help_text='One per line. If left blank, default suggestions will be used.',
        widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 3})
    )
    cta_question = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 2})
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.defaults = get_defaults()
        self.fields['report_period_label'].initial = self.defaults.report_period_label
        self.fields['cta_question'].initial = self.defaults.cta_question
        self.fields['prs_with_implemented_suggestions'].initial = 0

    def clean_logo_file(self):
        logo = self.cleaned_data.get('logo_file')
        if not logo:
            return None
        content_type = getattr(logo, 'content_type', '') or ''
        if not content_type.startswith('image/'):
            raise forms.ValidationError('Logo must be an image file')
        if logo.size > MAX_LOGO_SIZE:
            raise forms.ValidationError('Logo must be under 2MB')
        return logo

    def clean_highlights(self):
        entries = split_lines(self.cleaned_data.get('highlights'))
        if len(entries) > self.defaults.max_user_entries:
            raise forms.ValidationError(f'Maximum of {self.defaults.max_user_entries} highlights')
        return entries

    def clean_next_steps(self):
        entries = split_lines(self.cleaned_data.get('next_steps'))
        if len(entries) > self.defaults.max_user_entries:
            raise forms.ValidationError(f'Maximum of {self.defaults.max_user_entries} next steps')
        return entries

    def to_record(self, categories=None) -> ReportRecord:
        """Build the record from cleaned data. Call only after is_valid()."""
        data = self.cleaned_data
        logo = data.get('company_logo', '').strip() or None
        if data.get('logo_file'):
            logo = file_to_data_url(data['logo_file'])

        return ReportRecord(
            company_name=data['company_name'],
            company_logo=logo,
            report_period_label=data['report_period_label'],
            generated_by=data.get('generated_by') or None,
            prs_analyzed=data['prs_analyzed'],
            prs_with_implemented_suggestions=data.get('prs_with_implemented_suggestions') or 0,
            implemented_suggestions_count=data['implemented_suggestions_count'],
            implementation_rate_pct=data['implementation_rate_pct'],
            impact_categories=list(categories or []),
            highlights=data['highlights'],
            next_steps=data['next_steps'],
            cta_question=data.get('cta_question') or self.defaults.cta_question,
        )

    @staticmethod
    def initial_from_record(record: ReportRecord) -> dict:
        """Initial data that refills the form from a previously submitted record"""
        return {
            'company_name': record.company_name,
            # uploaded logos come back as data URLs, which fit the URL field too
            'company_logo': record.company_logo or '',
            'report_period_label': record.report_period_label,
            'generated_by': record.generated_by or '',
            'prs_analyzed': record.prs_analyzed,
            'prs_with_implemented_suggestions': record.prs_with_implemented_suggestions,
            'implemented_suggestions_count': record.implemented_suggestions_count,
            'implementation_rate_pct': record.implementation_rate_pct,
            'highlights': '\n'.join(record.highlights),
            'next_steps': '\n'.join(record.next_steps),
            'cta_question': record.cta_question,
        }


class ImpactCategoryForm(forms.Form):
    """One row of the impact-by-category table"""
    label = forms.CharField(
        required=False,
        max_length=100,
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Ex: Logical bugs'})
    )
    count = forms.IntegerField(
        required=False,
        min_value=0,
        widget=forms.NumberInput(attrs={'class': 'form-control', 'min': '0', 'placeholder': 'Qty'})
    )

    def clean(self):
        cleaned_data = super().clean()
        label = cleaned_data.get('label')
        count = cleaned_data.get('count')
        if count is not None and not label:
            self.add_error('label', 'Category label is required')
        return cleaned_data


class BaseImpactCategoryFormSet(forms.BaseFormSet):
    def categories(self):
        """Filled-in rows as ImpactCategory values, blank and deleted rows skipped."""
        rows = []
        for form in self.forms:
            data = getattr(form, 'cleaned_data', None)
            if not data or data.get('DELETE') or not data.get('label'):
                continue
            rows.append(ImpactCategory(label=data['label'], count=data.get('count') or 0))
        return rows

    @staticmethod
    def initial_from_record(record: ReportRecord):
        return [{'label': c.label, 'count': c.count} for c in record.impact_categories]


ImpactCategoryFormSet = forms.formset_factory(
    ImpactCategoryForm,
    formset=BaseImpactCategoryFormSet,
    extra=1,
    can_delete=True,
)

CATEGORY_PREFIX = 'categories'
