"""
Factory for creating a tracker from configuration.
"""
from typing import Optional

import requests

from config_manager import CollectorConfig, TrackerConfig, get_collector_config, get_tracker_config
from .emitter import CollectingEmitter, Emitter, RequestsEmitter
from .tracker import Tracker


def create_emitter(
    collector: CollectorConfig, session: Optional[requests.Session] = None
) -> Emitter:
    """Create the HTTP emitter for the configured collector.

    Args:
        collector: Collector settings
        session: Optional requests session to reuse

    Returns:
        A ``RequestsEmitter`` pointed at the collector
    """
    return RequestsEmitter(
        endpoint=collector.endpoint,
        scheme=collector.scheme,
        path=collector.path,
        timeout=collector.timeout,
        session=session,
        proxy_url=collector.proxy,
    )


def create_tracker(
    tracker_config: Optional[TrackerConfig] = None,
    collector_config: Optional[CollectorConfig] = None,
    emitter: Optional[Emitter] = None,
) -> Tracker:
    """Create a tracker wired to an emitter.

    Settings default to the global configuration. When tracking is switched off
    and no emitter is given, payloads go to an in-memory ``CollectingEmitter``
    so that no collector endpoint is required.
    """
    tracker_config = tracker_config or get_tracker_config()
    if emitter is None:
        if tracker_config.track:
            emitter = create_emitter(collector_config or get_collector_config())
        else:
            emitter = CollectingEmitter()

    return Tracker(
        emitter=emitter,
        namespace=tracker_config.namespace,
        app_id=tracker_config.app_id,
        encode_base64=tracker_config.encode_base64,
        platform=tracker_config.platform,
        contracts=tracker_config.contracts,
        debug=tracker_config.debug,
        track=tracker_config.track,
    )
