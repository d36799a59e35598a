"""
Snowplow Tracker

Builds event payloads (page views, structured and unstructured events, screen
views, e-commerce transactions) and sends them to a Snowplow collector.
"""

from .constants import VERSION
from .contracts import ContractError, ContractManager
from .emitter import CollectingEmitter, Emitter, RequestsEmitter
from .encoder import base64_decode, base64_encode
from .event_types import EventType, Platform
from .json_utils import MalformedJsonError, parse_json, serialize_json
from .models import EventData, SendResult, TransactionItem
from .payload import EventPayload, make_transaction_id
from .tracker import Tracker

__version__ = VERSION

__all__ = [
    'Tracker',
    'EventPayload',
    'EventType',
    'Platform',
    'EventData',
    'TransactionItem',
    'SendResult',
    'Emitter',
    'RequestsEmitter',
    'CollectingEmitter',
    'ContractError',
    'ContractManager',
    'MalformedJsonError',
    'base64_encode',
    'base64_decode',
    'parse_json',
    'serialize_json',
    'make_transaction_id',
]
