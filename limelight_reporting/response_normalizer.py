"""
Response normalization for Reporting Service results.

The service encodes collections as repeated <Item> elements, so a parsed
result may be absent, an empty element, a single record or a list of
records. Every list-returning operation is collapsed to a plain list here,
and usage results are rebuilt into a fixed aggregate shape.
"""

import logging
from typing import Any, Dict, List, Optional

from .models import USAGE_SCALAR_FIELDS, empty_usage_aggregate
from .operations import OperationConfig, ResultShape

logger = logging.getLogger(__name__)


ITEM_TAG = 'Item'


def as_list(value: Any) -> List[Any]:
    """
    Collapse an absent, empty, single or repeated value into a list.

    Example:
        >>> as_list(None), as_list(''), as_list({'id': '1'}), as_list([1, 2])
        ([], [], [{'id': '1'}], [1, 2])
    """
    if value is None or value == '':
        return []
    if isinstance(value, list):
        return list(value)
    return [value]


def _to_number(value: Any) -> Optional[float]:
    if value is None or value == '':
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(f"Non-numeric usage sample: {value!r}")
        return None


class ResponseNormalizer:
    """Maps raw result payloads to canonical values, one rule per result shape."""

    @staticmethod
    def items(result: Any, item_tag: str = ITEM_TAG) -> List[Any]:
        """
        Records of a collection result, in service order.

        Absent result, result without items and empty item collection all
        yield an empty list.
        """
        if not isinstance(result, dict):
            return []
        return as_list(result.get(item_tag))

    @staticmethod
    def access_token(result: Any) -> Dict[str, str]:
        """SOAPAccess fields as strings; empty dict if the result is missing."""
        if not isinstance(result, dict):
            return {}
        return {key: '' if value is None else str(value) for key, value in result.items()}

    @staticmethod
    def record(result: Any) -> Any:
        """Single record, passed through; a blank or whitespace-only result becomes an empty dict."""
        if result is None or (isinstance(result, str) and not result.strip()):
            return {}
        return result

    @staticmethod
    def usage(result: Any) -> Dict[str, Any]:
        """
        Build a usage aggregate from a SOAPNetworkUsage result.

        Returns:
            {startTime, startTimeEpoch, endTime, endTimeEpoch, interval, nsamples,
             values: [{type, label, units, samples: [float]}]}
        """
        data = empty_usage_aggregate()
        if not isinstance(result, dict):
            return data

        for name in USAGE_SCALAR_FIELDS:
            data[name] = result.get(name)

        values = []
        for item in ResponseNormalizer.items(result.get('variables')):
            if not isinstance(item, dict):
                continue
            values.append({
                'type': item.get('type'),
                'label': item.get('label'),
                'units': item.get('units'),
                'samples': [_to_number(s) for s in ResponseNormalizer.items(item.get('samples'))],
            })
        data['values'] = values
        return data

    @classmethod
    def normalize(cls, config: OperationConfig, result: Any) -> Any:
        """
        Normalize a result according to the operation's declared shape.

        Args:
            config: Operation configuration from OPERATION_REGISTRY
            result: Parsed <operation>Result payload (None when absent)

        Returns:
            Canonical value for the operation
        """
        if config.shape is ResultShape.LIST:
            return cls.items(result)
        if config.shape is ResultShape.USAGE:
            return cls.usage(result)
        if config.shape is ResultShape.RECORD:
            return cls.record(result)
        if config.shape is ResultShape.TOKEN:
            return cls.access_token(result)
        return result
