from django.test import SimpleTestCase, override_settings

from roi.defaults import get_defaults
from roi.records import ImpactCategory, RecordError, ReportRecord

MINIMAL = {
    'companyName': 'Acme',
    'prsAnalyzed': 10,
    'implementedSuggestionsCount': 4,
    'implementationRatePct': 40,
}


class ReportRecordFromDictTest(SimpleTestCase):
    def test_minimal_record_gets_defaults(self):
        record = ReportRecord.from_dict(MINIMAL)

        self.assertEqual(record.company_name, 'Acme')
        self.assertEqual(record.report_period_label, 'Last 14 days')
        self.assertTrue(record.cta_question.startswith('Does this align'))
        self.assertEqual(record.prs_with_implemented_suggestions, 0)
        self.assertIsNone(record.company_logo)
        self.assertIsNone(record.generated_by)
        self.assertEqual(record.impact_categories, [])
        self.assertEqual(record.highlights, [])
        self.assertEqual(record.next_steps, [])

    @override_settings(ROI_REPORT_DEFAULTS={'report_period_label': 'Last 30 days'})
    def test_defaults_come_from_settings(self):
        self.assertEqual(ReportRecord.from_dict(MINIMAL).report_period_label, 'Last 30 days')

    def test_full_record(self):
        record = ReportRecord.from_dict(dict(
            MINIMAL,
            companyLogo='data:image/png;base64,AAAA',
            generatedBy='Maria',
            prsWithImplementedSuggestions=3,
            implementationRatePct=42.5,
            impactCategories=[{'label': 'Security', 'count': 4}, {'label': 'Bugs'}],
            highlights=['Strong trust signal'],
            nextSteps=['Expand to mobile team'],
            ctaQuestion='What is missing?',
        ))

        self.assertEqual(record.company_logo, 'data:image/png;base64,AAAA')
        self.assertEqual(record.generated_by, 'Maria')
        self.assertEqual(record.implementation_rate_pct, 42.5)
        self.assertEqual(record.impact_categories, [ImpactCategory('Security', 4), ImpactCategory('Bugs', 0)])
        self.assertEqual(record.highlights, ['Strong trust signal'])
        self.assertEqual(record.next_steps, ['Expand to mobile team'])
        self.assertEqual(record.cta_question, 'What is missing?')

    def test_whole_floats_become_integers(self):
        record = ReportRecord.from_dict(dict(MINIMAL, prsAnalyzed=10.0))

        self.assertEqual(record.prs_analyzed, 10)
        self.assertIsInstance(record.prs_analyzed, int)

    def test_blank_optional_text_is_none(self):
        record = ReportRecord.from_dict(dict(MINIMAL, generatedBy='  ', companyLogo=''))

        self.assertIsNone(record.generated_by)
        self.assertIsNone(record.company_logo)

    def test_missing_required_fields(self):
        with self.assertRaisesMessage(RecordError, 'prsAnalyzed, implementationRatePct'):
            ReportRecord.from_dict({'companyName': 'Acme', 'implementedSuggestionsCount': 1})

    def test_rejects_non_objects(self):
        for data in (None, [], 'Acme', 42):
            with self.assertRaises(RecordError):
                ReportRecord.from_dict(data)

    def test_rejects_wrong_types(self):
        bad_values = [
            {'companyName': 42},
            {'prsAnalyzed': '10'},
            {'prsAnalyzed': True},
            {'prsAnalyzed': 10.5},
            {'implementationRatePct': 'high'},
            {'highlights': 'one highlight'},
            {'nextSteps': [1, 2]},
            {'impactCategories': [{'count': 3}]},
            {'impactCategories': [{'label': 'Bugs', 'count': 'many'}]},
            {'prsAnalyzed': -1},
            {'prsWithImplementedSuggestions': -2},
            {'implementedSuggestionsCount': -4.0},
            {'impactCategories': [{'label': 'Bugs', 'count': -1}]},
        ]
        for override in bad_values:
            with self.subTest(override=override), self.assertRaises(RecordError):
                ReportRecord.from_dict(dict(MINIMAL, **override))


class ReportRecordJsonTest(SimpleTestCase):
    def test_invalid_json(self):
        for raw in (b'', None, b'{not json', '{"companyName": "Acme"'):
            with self.subTest(raw=raw), self.assertRaises(RecordError):
                ReportRecord.from_json(raw)

    def test_to_dict_uses_wire_names(self):
        record = ReportRecord.from_dict(dict(MINIMAL, impactCategories=[{'label': 'Bugs', 'count': 2}]))
        data = record.to_dict()

        self.assertEqual(data['companyName'], 'Acme')
        self.assertEqual(data['impactCategories'], [{'label': 'Bugs', 'count': 2}])
        self.assertEqual(ReportRecord.from_json(record.to_json()), record)


class ReportDefaultsTest(SimpleTestCase):
    @override_settings(ROI_REPORT_DEFAULTS={'next_steps': ['Only step']})
    def test_overrides(self):
        self.assertEqual(get_defaults().next_steps, ('Only step',))

    @override_settings(ROI_REPORT_DEFAULTS={'colour': 'blue'})
    def test_unknown_override(self):
        with self.assertRaisesMessage(ValueError, 'colour'):
            get_defaults()
