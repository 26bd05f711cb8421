"""Unit tests for RequestBuilder parameter lists."""
from datetime import datetime

import pytest

from limelight_reporting import RequestBuilder, SOAPParam


class TestReportData:
    """Tests for getReportData parameters."""

    def test_parameter_order_and_types(self, report, category, time_range):
        params = RequestBuilder.report_data(report, category, time_range, 'num_bytes desc')

        assert [(p.name, p.type) for p in params] == [
            ('report', 'types:SOAPAvailableReport'),
            ('category', 'types:SOAPAvailableCategory'),
            ('timeRange', 'types:SOAPAvailableTimeRange'),
            ('orderBy', 'xsd:string'),
        ]
        assert params[3].value == 'num_bytes desc'

    @pytest.mark.parametrize('order_by', [None, ''])
    def test_missing_order_by_is_sent_as_empty_string(self, report, category, time_range, order_by):
        params = RequestBuilder.report_data(report, category, time_range, order_by)

        assert params[3] == SOAPParam('orderBy', 'xsd:string', '')

    def test_order_by_is_not_validated(self, report, category, time_range):
        params = RequestBuilder.report_data(report, category, time_range, 'bogus sideways')

        assert params[3].value == 'bogus sideways'

    def test_handles_pass_through_in_key_order(self, report, category, time_range):
        params = RequestBuilder.report_data(report, category, time_range)

        report_param = params[0]
        assert [child.name for child in report_param.value] == ['desc', 'name', 'id', 'key']
        assert [child.value for child in report_param.value] == ['HTTP traffic', 'HTTP', '17', 'rpt-17']

    def test_handle_with_extra_fields_is_forwarded(self, category, time_range):
        report = {'id': '9', 'custom': 'kept'}

        params = RequestBuilder.report_data(report, category, time_range)

        assert {child.name: child.value for child in params[0].value} == {'id': '9', 'custom': 'kept'}


class TestListings:
    """Tests for the report-scoped listing parameters."""

    @pytest.mark.parametrize('builder', [
        RequestBuilder.available_categories,
        RequestBuilder.available_time_ranges,
        RequestBuilder.network_usage_sections,
    ])
    def test_single_report_parameter(self, builder, report):
        params = builder(report)

        assert len(params) == 1
        assert params[0].name == 'report'
        assert params[0].is_struct

    @pytest.mark.parametrize('builder', [
        RequestBuilder.available_reports,
        RequestBuilder.available_counters,
        RequestBuilder.current_traffic,
    ])
    def test_token_only_operations_have_no_parameters(self, builder):
        assert builder() == []


class TestDiskUsage:
    """Tests for getDiskUsage parameters."""

    def test_time_range_parameter_is_lower_case(self, report, time_range):
        params = RequestBuilder.disk_usage(report, time_range)

        assert [p.name for p in params] == ['report', 'timerange']
        assert params[1].type == 'types:SOAPAvailableTimeRange'


class TestNetworkUsage:
    """Tests for getNetworkUsage parameters."""

    def test_parameters(self, report):
        section = {'id': '2', 'name': 'Bandwidth'}

        params = RequestBuilder.network_usage(
            report, section, datetime(2012, 3, 1, 0, 0), datetime(2012, 3, 2, 0, 0), 300
        )

        assert [p.name for p in params] == ['report', 'section', 'startDateTime', 'endDateTime', 'interval']
        assert params[1].type == 'types:SOAPNetworkUsageSection'
        assert params[2] == SOAPParam('startDateTime', 'xsd:dateTime', '2012-03-01T00:00:00-07:00')
        assert params[3].value == '2012-03-02T00:00:00-07:00'
        assert params[4] == SOAPParam('interval', 'xsd:int', 300)

    def test_epoch_bounds_are_formatted_in_service_time(self, report):
        params = RequestBuilder.network_usage(report, {'id': '2'}, 0, 3600, 60)

        assert params[2].value == '1969-12-31T17:00:00-07:00'
        assert params[3].value == '1969-12-31T18:00:00-07:00'

    @pytest.mark.parametrize('interval', [0, -60, 1.5, '300', True])
    def test_invalid_interval(self, report, interval):
        with pytest.raises(ValueError):
            RequestBuilder.network_usage(report, {'id': '2'}, 0, 3600, interval)
