"""Unit tests for ResponseNormalizer."""
import logging

import pytest

from limelight_reporting import OPERATION_REGISTRY, ResponseNormalizer
from limelight_reporting.response_normalizer import as_list


USAGE_RESULT = {
    'startTime': '2012-03-01T00:00:00-07:00',
    'startTimeEpoch': '1330585200',
    'endTime': '2012-03-01T00:10:00-07:00',
    'endTimeEpoch': '1330585800',
    'interval': '300',
    'nsamples': '2',
    'variables': {
        'Item': [
            {'type': 'disk', 'label': 'Used', 'units': 'GB', 'samples': {'Item': ['1.5', '2']}},
            {'type': 'disk', 'label': 'Free', 'units': 'GB', 'samples': {'Item': '10'}},
        ]
    },
}


class TestItems:
    """Tests for collection results."""

    @pytest.mark.parametrize('result', [None, '', {}, {'Item': None}, {'Item': ''}, {'Other': 'x'}])
    def test_empty_results_become_empty_list(self, result):
        assert ResponseNormalizer.items(result) == []

    def test_single_item_becomes_one_element_list(self, report):
        assert ResponseNormalizer.items({'Item': report}) == [report]

    def test_items_keep_service_order(self):
        records = [{'id': str(i)} for i in range(5)]

        assert ResponseNormalizer.items({'Item': records}) == records

    def test_as_list_copies(self):
        original = [1, 2]
        copy = as_list(original)
        copy.append(3)

        assert original == [1, 2]


class TestUsage:
    """Tests for usage aggregates."""

    def test_scalars_copied_verbatim(self):
        data = ResponseNormalizer.usage(USAGE_RESULT)

        assert data['startTimeEpoch'] == '1330585200'
        assert data['interval'] == '300'
        assert data['nsamples'] == '2'
        assert data['endTime'] == '2012-03-01T00:10:00-07:00'

    def test_values_one_per_variable_in_order(self):
        data = ResponseNormalizer.usage(USAGE_RESULT)

        assert [v['label'] for v in data['values']] == ['Used', 'Free']
        assert data['values'][0] == {'type': 'disk', 'label': 'Used', 'units': 'GB', 'samples': [1.5, 2.0]}

    def test_single_sample_becomes_list(self):
        data = ResponseNormalizer.usage(USAGE_RESULT)

        assert data['values'][1]['samples'] == [10.0]

    @pytest.mark.parametrize('result', [None, '', {}])
    def test_missing_result_gives_empty_aggregate(self, result):
        data = ResponseNormalizer.usage(result)

        assert data['values'] == []
        assert data['startTime'] is None
        assert set(data) == {
            'startTime', 'startTimeEpoch', 'endTime', 'endTimeEpoch', 'interval', 'nsamples', 'values',
        }

    def test_single_variable(self):
        result = {'variables': {'Item': {'type': 't', 'label': 'l', 'units': 'u', 'samples': ''}}}

        data = ResponseNormalizer.usage(result)

        assert data['values'] == [{'type': 't', 'label': 'l', 'units': 'u', 'samples': []}]

    def test_non_numeric_sample_is_logged_and_kept_as_none(self, caplog):
        result = {'variables': {'Item': {'samples': {'Item': ['1', 'n/a', None]}}}}

        with caplog.at_level(logging.WARNING, logger='limelight_reporting.response_normalizer'):
            data = ResponseNormalizer.usage(result)

        assert data['values'][0]['samples'] == [1.0, None, None]
        assert 'Non-numeric usage sample' in caplog.text


class TestNormalize:
    """Tests for shape dispatch."""

    def test_list_shape(self, report):
        config = OPERATION_REGISTRY['getAvailableReports']

        assert ResponseNormalizer.normalize(config, {'Item': report}) == [report]

    def test_record_shape(self):
        config = OPERATION_REGISTRY['getCurrentTraffic']

        assert ResponseNormalizer.normalize(config, {'in': '10', 'out': '20'}) == {'in': '10', 'out': '20'}
        assert ResponseNormalizer.normalize(config, None) == {}

    @pytest.mark.parametrize('result', ['', '\n      ', ' \t'])
    def test_blank_record_becomes_empty_dict(self, result):
        config = OPERATION_REGISTRY['getCurrentTraffic']

        assert ResponseNormalizer.normalize(config, result) == {}

    def test_usage_shape(self):
        config = OPERATION_REGISTRY['getDiskUsage']

        assert ResponseNormalizer.normalize(config, USAGE_RESULT)['nsamples'] == '2'

    def test_raw_shape_passes_through(self):
        config = OPERATION_REGISTRY['getStreams']
        payload = {'Item': {'name': 'live'}}

        assert ResponseNormalizer.normalize(config, payload) is payload
