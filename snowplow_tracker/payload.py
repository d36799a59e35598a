"""
Event Payload

Immutable key-value representation of one tracking event. Every builder method
returns a new ``EventPayload``; the receiver is never modified, so callers
thread the returned value forward:

    payload = EventPayload().add_config("encode_base64", True)
    payload = payload.configure_page_view("http://x.test", "Home")
    payload = payload.add_standard_fields("pc", VERSION, "ns", "app")

Parameters hold the wire fields (all values are strings). Configurations hold
boolean switches that steer how the builder encodes data, currently only
``encode_base64``.
"""

import random
import time
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from .constants import DEFAULT_VENDOR, ENCODE_BASE64, STICKY_KEYS
from .encoder import base64_encode
from .event_types import EventType
from .json_utils import serialize_json
from .models import EventData

_RNG = random.Random()

TRANSACTION_ID_MIN = 100000
TRANSACTION_ID_MAX = 999999


def make_transaction_id(rng: Optional[random.Random] = None) -> str:
    """
    Generate a pseudo-random 6 digit transaction id.

    Args:
        rng: Generator to draw from; a module-level entropy-seeded generator by default

    Returns:
        Decimal string between 100000 and 999999
    """
    return str((rng or _RNG).randint(TRANSACTION_ID_MIN, TRANSACTION_ID_MAX))


def current_timestamp() -> str:
    """Current time as milliseconds since epoch."""
    return str(int(time.time() * 1000))


def _to_str(value: Any) -> str:
    """Convert an optional field value to its wire form; absent values become ''."""
    if value is None:
        return ""
    return str(value)


class EventPayload:
    """Immutable container of payload parameters and configurations."""

    __slots__ = ("_parameters", "_configurations")

    def __init__(
        self,
        parameters: Optional[Mapping[str, str]] = None,
        configurations: Optional[Mapping[str, bool]] = None,
    ):
        """Create a payload stamped with the current time.

        Args:
            parameters: Initial parameters; an explicit ``dtm`` wins over the fresh timestamp
            configurations: Initial configuration switches
        """
        params = {"dtm": current_timestamp()}
        params.update(parameters or {})
        self._parameters = MappingProxyType(params)
        self._configurations = MappingProxyType(dict(configurations or {}))

    @classmethod
    def _derive(cls, parameters: Dict[str, str], configurations: Mapping[str, bool]) -> "EventPayload":
        payload = cls.__new__(cls)
        payload._parameters = MappingProxyType(parameters)
        payload._configurations = MappingProxyType(dict(configurations))
        return payload

    def _with(self, updates: Mapping[str, Any], remove: Iterable[str] = ()) -> "EventPayload":
        params = dict(self._parameters)
        for key in remove:
            params.pop(key, None)
        for key, value in updates.items():
            params[key] = _to_str(value)
        return self._derive(params, self._configurations)

    # ------------------------------------------------------------------
    # Generic builders
    # ------------------------------------------------------------------

    def add(self, key: str, value: Any) -> "EventPayload":
        """Set one parameter, overwriting any existing value."""
        return self._with({key: value})

    def add_config(self, key: str, flag: bool) -> "EventPayload":
        configs = dict(self._configurations)
        configs[key] = bool(flag)
        return self._derive(dict(self._parameters), configs)

    def _encode_flag(self, encode_base64: Optional[bool]) -> bool:
        if encode_base64 is None:
            return self.get_config(ENCODE_BASE64)
        return encode_base64

    def _add_encoded_json(
        self, data: Any, encode_base64: Optional[bool], keys: Tuple[str, str]
    ) -> "EventPayload":
        plain_key, base64_key = keys
        if data is None:
            return self
        if isinstance(data, EventData):
            text = data.to_json()
        else:
            text = serialize_json(data)
        if self._encode_flag(encode_base64):
            return self._with({base64_key: base64_encode(text)}, remove=(plain_key,))
        return self._with({plain_key: text}, remove=(base64_key,))

    def add_json_context(self, context: Any, encode_base64: Optional[bool] = None) -> "EventPayload":
        """
        Attach JSON context under ``co`` (plain) or ``cx`` (base64).

        Args:
            context: Parsed JSON value or ``EventData``; ``None`` leaves the payload unchanged
            encode_base64: Encoding switch; defaults to the ``encode_base64`` configuration

        Returns:
            New payload holding exactly one of the two context keys
        """
        return self._add_encoded_json(context, encode_base64, ("co", "cx"))

    def add_unstructured_event(self, data: Any, encode_base64: Optional[bool] = None) -> "EventPayload":
        """Attach unstructured event JSON under ``ue_pr`` (plain) or ``ue_px`` (base64)."""
        return self._add_encoded_json(data, encode_base64, ("ue_pr", "ue_px"))

    def add_standard_fields(
        self, platform: str, tracker_version: str, namespace: str, app_id: str
    ) -> "EventPayload":
        return self._with({
            "p": platform,
            "tv": tracker_version,
            "tna": namespace,
            "aid": app_id,
        })

    def set_timestamp(self, timestamp: Optional[int] = None) -> "EventPayload":
        """Set ``dtm`` to the given epoch milliseconds, or to now when absent or 0."""
        if not timestamp:
            return self._with({"dtm": current_timestamp()})
        return self._with({"dtm": int(timestamp)})

    def set_transaction_id(
        self, transaction_id: Optional[str] = None, rng: Optional[random.Random] = None
    ) -> "EventPayload":
        if transaction_id is None or transaction_id == "":
            transaction_id = make_transaction_id(rng)
        return self._with({"tid": transaction_id})

    def sticky_subset(self, keys: Iterable[str] = STICKY_KEYS) -> "EventPayload":
        """Fresh payload that keeps only the given keys and all configurations."""
        carried = {k: self._parameters[k] for k in keys if k in self._parameters}
        return EventPayload(carried, self._configurations)

    # ------------------------------------------------------------------
    # Event configuration
    # ------------------------------------------------------------------

    def _configure(self, event_type: EventType, fields: Dict[str, Any], context: Any) -> "EventPayload":
        updates = {"e": event_type.value}
        updates.update(fields)
        updates.setdefault("evn", DEFAULT_VENDOR)
        return self._with(updates).add_json_context(context)

    def configure_page_view(
        self,
        page_url: str,
        page_title: Optional[str] = None,
        referrer: Optional[str] = None,
        context: Any = None,
    ) -> "EventPayload":
        return self._configure(EventType.PAGE_VIEW, {
            "url": page_url,
            "page": page_title,
            "refr": referrer,
        }, context)

    def configure_structured_event(
        self,
        category: str,
        action: Optional[str],
        label: Optional[str],
        property_: Optional[str],
        value: Any,
        context: Any = None,
    ) -> "EventPayload":
        return self._configure(EventType.STRUCTURED, {
            "se_ca": category,
            "se_ac": action,
            "se_la": label,
            "se_pr": property_,
            "se_va": value,
        }, context)

    def configure_unstructured_event(
        self,
        vendor: str,
        event_name: str,
        data: Any,
        context: Any = None,
    ) -> "EventPayload":
        """
        Configure an unstructured event.

        Args:
            vendor: Event vendor, sent as ``evn``
            event_name: Event name, sent as ``ue_na``
            data: Event properties (``EventData`` or parsed JSON)
            context: Optional parsed JSON context

        Returns:
            New payload with the event JSON under ``ue_pr`` or ``ue_px``
        """
        payload = self._with({
            "e": EventType.UNSTRUCTURED.value,
            "evn": vendor or DEFAULT_VENDOR,
            "ue_na": event_name,
        })
        return payload.add_unstructured_event(data).add_json_context(context)

    def configure_ecommerce_transaction(
        self,
        order_id: str,
        total_value: Optional[float] = None,
        affiliation: Optional[str] = None,
        tax_value: Optional[float] = None,
        shipping: Optional[float] = None,
        city: Optional[str] = None,
        state: Optional[str] = None,
        country: Optional[str] = None,
        currency: Optional[str] = None,
        context: Any = None,
        transaction_id: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ) -> "EventPayload":
        """
        Configure an e-commerce transaction.

        A transaction id is generated when ``transaction_id`` is not given; pass the
        same id to every item of the transaction.
        """
        payload = self.set_transaction_id(transaction_id, rng)
        return payload._configure(EventType.TRANSACTION, {
            "tr_id": order_id,
            "tr_tt": total_value,
            "tr_af": affiliation,
            "tr_tx": tax_value,
            "tr_sh": shipping,
            "tr_ci": city,
            "tr_st": state,
            "tr_co": country,
            "tr_cu": currency,
        }, context)

    def configure_ecommerce_transaction_item(
        self,
        order_id: str,
        sku: str,
        price: Optional[float] = None,
        quantity: Optional[int] = None,
        name: Optional[str] = None,
        category: Optional[str] = None,
        currency: Optional[str] = None,
        context: Any = None,
        transaction_id: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ) -> "EventPayload":
        payload = self.set_transaction_id(transaction_id, rng)
        return payload._configure(EventType.TRANSACTION_ITEM, {
            "ti_id": order_id,
            "ti_sk": sku,
            "ti_nm": name,
            "ti_ca": category,
            "ti_pr": price,
            "ti_qu": quantity,
            "ti_cu": currency,
        }, context)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def keys(self) -> Tuple[str, ...]:
        return tuple(self._parameters)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._parameters.get(key, default)

    def config_keys(self) -> Tuple[str, ...]:
        return tuple(self._configurations)

    def get_config(self, key: str) -> bool:
        return self._configurations.get(key, False)

    def params(self) -> Dict[str, str]:
        """Copy of all parameters in insertion order."""
        return dict(self._parameters)

    def configs(self) -> Dict[str, bool]:
        return dict(self._configurations)

    def __contains__(self, key: object) -> bool:
        return key in self._parameters

    def __len__(self) -> int:
        return len(self._parameters)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EventPayload):
            return NotImplemented
        return (
            dict(self._parameters) == dict(other._parameters)
            and dict(self._configurations) == dict(other._configurations)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"EventPayload(parameters={dict(self._parameters)!r}, configurations={dict(self._configurations)!r})"

    def __str__(self) -> str:
        return f"Parameters: {dict(self._parameters)}\nConfigurations: {dict(self._configurations)}"
