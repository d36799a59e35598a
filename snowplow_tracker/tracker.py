"""
Tracker

Main entry point for application code. Each ``track_*`` method validates its
inputs, builds an ``EventPayload``, stamps the fields shared by every event and
hands the result to the emitter.

Identity fields set through the ``set_*`` methods (user id, screen resolution,
viewport, color depth, timezone, language) are carried over to every following
event. Everything else is dropped after each send.
"""

import logging
import random
import threading
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError

from .constants import DEFAULT_PLATFORM, DEFAULT_VENDOR, ENCODE_BASE64, SCREEN_VIEW_EVENT_NAME, VERSION
from .contracts import ContractError, ContractManager
from .emitter import Emitter
from .json_utils import parse_json
from .models import EventData, SendResult, TransactionItem
from .payload import EventPayload, current_timestamp, make_transaction_id

_LOG = logging.getLogger(__name__)

ItemInput = Union[TransactionItem, Mapping[str, Any]]


class Tracker:
    """Builds and sends tracking events for one application."""

    def __init__(
        self,
        emitter: Emitter,
        namespace: str,
        app_id: str,
        encode_base64: bool = True,
        platform: str = DEFAULT_PLATFORM,
        contracts: bool = True,
        debug: bool = False,
        track: bool = True,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the tracker.

        Args:
            emitter: Transport that receives finished payloads
            namespace: Tracker namespace, sent as ``tna``
            app_id: Application id, sent as ``aid``
            encode_base64: Send context and unstructured JSON base64 encoded
            platform: Platform code, sent as ``p``
            contracts: Validate inputs before building payloads
            debug: Log every payload before it is submitted
            track: Submit payloads; when False they are built but not sent
            rng: Generator for transaction ids
        """
        self.emitter = emitter
        self.namespace = namespace
        self.app_id = app_id
        self.debug = debug
        self.track = track
        self._contracts = ContractManager(contracts)
        self._contracts.supported_platform(platform)
        self.platform = platform
        self._rng = rng or random.Random()
        self._lock = threading.RLock()
        self._payload = EventPayload().add_config(ENCODE_BASE64, encode_base64)

    @property
    def encode_base64(self) -> bool:
        """Whether context and unstructured JSON are sent base64 encoded."""
        return self._payload.get_config(ENCODE_BASE64)

    @encode_base64.setter
    def encode_base64(self, value: bool) -> None:
        with self._lock:
            self._payload = self._payload.add_config(ENCODE_BASE64, bool(value))

    @property
    def payload(self) -> EventPayload:
        """Payload that the next event will be built on."""
        return self._payload

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _parse_context(self, context: Optional[Union[str, Mapping[str, Any]]]) -> Any:
        if context is None or context == "":
            return None
        if isinstance(context, Mapping):
            return dict(context)
        return parse_json(context)

    def _finish(self, payload: EventPayload, timestamp: Optional[int] = None) -> Dict[str, str]:
        """Stamp a built payload and reset the carried one. Caller holds the lock."""
        payload = payload.add_standard_fields(self.platform, VERSION, self.namespace, self.app_id)
        payload = payload.set_timestamp(timestamp)
        self._payload = payload.sticky_subset()
        if self.debug:
            _LOG.debug("Payload:\n%s", payload)
        return payload.params()

    def _submit(self, params: Dict[str, str]) -> SendResult:
        # Runs outside the lock
        if not self.track:
            return SendResult.skipped_result(params)
        return self.emitter.submit(params)

    def _update(self, key: str, value: Any) -> None:
        with self._lock:
            self._payload = self._payload.add(key, value)

    # ------------------------------------------------------------------
    # Tracking methods
    # ------------------------------------------------------------------

    def track_page_view(
        self,
        page_url: str,
        page_title: Optional[str] = None,
        referrer: Optional[str] = None,
        context: Optional[str] = None,
        timestamp: Optional[int] = None,
    ) -> SendResult:
        """
        Track a page view.

        Args:
            page_url: URL of the page
            page_title: Title of the page (optional)
            referrer: Referring URL (optional)
            context: Additional JSON context (optional)
            timestamp: Event time in epoch milliseconds; current time when absent or 0

        Returns:
            Result reported by the emitter
        """
        self._contracts.non_empty_string(page_url, "page_url")
        json_context = self._parse_context(context)
        with self._lock:
            payload = self._payload.configure_page_view(page_url, page_title, referrer, json_context)
            params = self._finish(payload, timestamp)
        return self._submit(params)

    def track_structured_event(
        self,
        category: str,
        action: Optional[str] = None,
        label: Optional[str] = None,
        property_: Optional[str] = None,
        value: Optional[Union[int, float]] = None,
        context: Optional[str] = None,
        timestamp: Optional[int] = None,
    ) -> SendResult:
        """
        Track a structured event.

        Args:
            category: Category of the event
            action: Action performed (optional)
            label: Label of the event (optional)
            property_: Property being tracked (optional)
            value: Numeric value associated with the event
            context: Additional JSON context (optional)
            timestamp: Event time in epoch milliseconds

        Returns:
            Result reported by the emitter
        """
        self._contracts.non_empty_string(category, "category")
        self._contracts.required_number(value, "value")
        json_context = self._parse_context(context)
        with self._lock:
            payload = self._payload.configure_structured_event(
                category, action, label, property_, value, json_context
            )
            params = self._finish(payload, timestamp)
        return self._submit(params)

    def track_unstructured_event(
        self,
        vendor: str,
        event_name: str,
        data: Union[EventData, Mapping[str, Any], str],
        context: Optional[str] = None,
        timestamp: Optional[int] = None,
    ) -> SendResult:
        """
        Track an unstructured event.

        ``data`` may be a mapping of properties, a JSON string or an ``EventData``.

        Raises:
            ContractError: If vendor, name or data are empty
            MalformedJsonError: If ``data`` or ``context`` is not valid JSON
        """
        self._contracts.non_empty_string(vendor, "vendor")
        self._contracts.non_empty_string(event_name, "event_name")
        event_data = EventData.coerce(data)
        self._contracts.non_empty_dict(event_data.tree, "data")
        json_context = self._parse_context(context)
        with self._lock:
            payload = self._payload.configure_unstructured_event(vendor, event_name, event_data, json_context)
            params = self._finish(payload, timestamp)
        return self._submit(params)

    def track_screen_view(
        self,
        name: str,
        id_: Optional[str] = None,
        context: Optional[str] = None,
        timestamp: Optional[int] = None,
    ) -> SendResult:
        """Track a screen view as an unstructured ``screen_view`` event."""
        self._contracts.non_empty_string(name, "name")
        properties: Dict[str, Any] = {"name": name}
        if id_ is not None:
            properties["id"] = id_
        return self.track_unstructured_event(
            DEFAULT_VENDOR, SCREEN_VIEW_EVENT_NAME, properties, context, timestamp
        )

    def _validate_items(self, items: Optional[Iterable[ItemInput]]) -> List[TransactionItem]:
        validated = []
        for index, item in enumerate(items or []):
            if isinstance(item, TransactionItem):
                validated.append(item)
                continue
            try:
                validated.append(TransactionItem.model_validate(item))
            except ValidationError as e:
                raise ContractError(f"Invalid transaction item at index {index}: {e}") from e
        return validated

    def track_ecommerce_transaction(
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
        items: Optional[Iterable[ItemInput]] = None,
        context: Optional[str] = None,
        timestamp: Optional[int] = None,
        transaction_id: Optional[str] = None,
    ) -> List[SendResult]:
        """
        Track an e-commerce transaction followed by one event per item.

        The transaction and all of its items share one transaction id and one
        timestamp. All items are validated before anything is sent.

        Args:
            order_id: Order id of the transaction
            total_value: Total value (optional)
            affiliation: Affiliation (optional)
            tax_value: Tax value (optional)
            shipping: Shipping cost (optional)
            city: Customer city (optional)
            state: Customer state (optional)
            country: Customer country (optional)
            currency: Currency code (optional)
            items: ``TransactionItem`` objects or mappings with the same fields
            context: Additional JSON context for the transaction event (optional)
            timestamp: Event time in epoch milliseconds
            transaction_id: Transaction id; generated when absent

        Returns:
            Emitter results, transaction first, then one per item in order
        """
        self._contracts.non_empty_string(order_id, "order_id")
        validated_items = self._validate_items(items)
        json_context = self._parse_context(context)

        with self._lock:
            transaction_id = transaction_id or make_transaction_id(self._rng)
            timestamp = int(timestamp) if timestamp else int(current_timestamp())

            payload = self._payload.configure_ecommerce_transaction(
                order_id, total_value, affiliation, tax_value, shipping,
                city, state, country, currency, json_context, transaction_id,
            )
            batch = [self._finish(payload, timestamp)]

            for item in validated_items:
                payload = self._payload.configure_ecommerce_transaction_item(
                    item.item_id or order_id, item.sku, item.price, item.quantity,
                    item.name, item.category, item.currency,
                    transaction_id=transaction_id,
                )
                batch.append(self._finish(payload, timestamp))
        return [self._submit(params) for params in batch]

    # ------------------------------------------------------------------
    # Sticky identity fields
    # ------------------------------------------------------------------

    def set_platform(self, platform: str) -> None:
        """Set the platform stamped on every following event."""
        self._contracts.supported_platform(platform)
        self.platform = platform

    def set_user_id(self, user_id: str) -> None:
        self._contracts.non_empty_string(user_id, "user_id")
        self._update("uid", user_id)

    def set_screen_resolution(self, width: int, height: int) -> None:
        self._contracts.positive_number(width, "width")
        self._contracts.positive_number(height, "height")
        self._update("res", f"{width}x{height}")

    def set_viewport(self, width: int, height: int) -> None:
        self._contracts.positive_number(width, "width")
        self._contracts.positive_number(height, "height")
        self._update("vp", f"{width}x{height}")

    def set_color_depth(self, depth: int) -> None:
        self._contracts.positive_number(depth, "depth", allow_zero=True)
        self._update("cd", depth)

    def set_timezone(self, timezone: str) -> None:
        self._contracts.non_empty_string(timezone, "timezone")
        self._update("tz", timezone)

    def set_language(self, language: str) -> None:
        self._contracts.non_empty_string(language, "language")
        self._update("lang", language)

    def set_param(self, key: str, value: Any) -> None:
        """Add a custom parameter to the next event only."""
        self._contracts.non_reserved_key(key)
        self._update(key, value)
