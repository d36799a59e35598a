#!/usr/bin/env python3
"""
track_event.py – send a single tracking event from the command line

Collector and tracker settings come from ``tracker_config.json`` and
``SNOWPLOW_*`` environment variables; the flags below override them.

Examples:
    track_event.py page-view http://example.com --title Home
    track_event.py struct shop --action buy --value 42 --context '{"k": "v"}'
    track_event.py unstruct com.acme signup '{"plan": "pro"}'
    track_event.py screen-view Settings --id settings-1
    track_event.py --dry-run --debug page-view http://example.com
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from typing import List

from config_manager import get_collector_config, get_tracker_config
from snowplow_tracker import SendResult
from snowplow_tracker.factory import create_tracker
from snowplow_tracker.logging_config import setup_logging, stop_logging

_LOG = logging.getLogger("track_event")


def _parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Send one event to a Snowplow collector.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("--collector", help="Collector endpoint (host[:port])")
    p.add_argument("--namespace", help="Tracker namespace")
    p.add_argument("--app-id", dest="app_id", help="Application id")
    p.add_argument("--platform", help="Platform code (pc, tv, mob, cnsl, iot)")
    p.add_argument("--user-id", dest="user_id", help="User id attached to the event")
    p.add_argument("--plain", action="store_true", help="Send JSON without base64 encoding")
    p.add_argument("--dry-run", action="store_true", help="Build the payload but do not send it")
    p.add_argument("--debug", action="store_true", help="Verbose logging")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--context", help="Additional JSON context")

    sub = p.add_subparsers(dest="event", required=True)

    pv = sub.add_parser("page-view", parents=[common], help="Track a page view")
    pv.add_argument("url")
    pv.add_argument("--title")
    pv.add_argument("--referrer")

    se = sub.add_parser("struct", parents=[common], help="Track a structured event")
    se.add_argument("category")
    se.add_argument("--action")
    se.add_argument("--label")
    se.add_argument("--property", dest="property_")
    se.add_argument("--value", type=float, required=True)

    ue = sub.add_parser("unstruct", parents=[common], help="Track an unstructured event")
    ue.add_argument("vendor")
    ue.add_argument("name")
    ue.add_argument("data", help="Event properties as a JSON object")

    sv = sub.add_parser("screen-view", parents=[common], help="Track a screen view")
    sv.add_argument("name")
    sv.add_argument("--id", dest="id_")

    return p.parse_args(argv)


def _send(args: argparse.Namespace) -> SendResult:
    tracker_config = get_tracker_config()
    collector_config = get_collector_config()
    overrides = {
        "namespace": args.namespace,
        "app_id": args.app_id,
        "platform": args.platform,
    }
    tracker_config = dataclasses.replace(
        tracker_config, **{k: v for k, v in overrides.items() if v is not None}
    )
    if args.plain:
        tracker_config = dataclasses.replace(tracker_config, encode_base64=False)
    if args.dry_run:
        tracker_config = dataclasses.replace(tracker_config, track=False, debug=True)
    if args.debug:
        tracker_config = dataclasses.replace(tracker_config, debug=True)
    if args.collector:
        collector_config = dataclasses.replace(collector_config, endpoint=args.collector)

    tracker = create_tracker(tracker_config, collector_config)
    if args.user_id:
        tracker.set_user_id(args.user_id)

    if args.event == "page-view":
        return tracker.track_page_view(args.url, args.title, args.referrer, args.context)
    if args.event == "struct":
        value = int(args.value) if args.value.is_integer() else args.value
        return tracker.track_structured_event(
            args.category, args.action, args.label, args.property_, value, args.context
        )
    if args.event == "unstruct":
        return tracker.track_unstructured_event(args.vendor, args.name, args.data, args.context)
    return tracker.track_screen_view(args.name, args.id_, args.context)


def main(argv: List[str] | None = None) -> int:
    args = _parse_args(argv)
    setup_logging(args.debug or args.dry_run)
    try:
        result = _send(args)
    except ValueError as exc:  # ContractError, MalformedJsonError, missing collector
        _LOG.error("Invalid input: %s", exc)
        return 2
    finally:
        stop_logging()

    if result.skipped:
        print("Dry run, payload not sent")
        return 0
    if not result.success:
        print(f"Failed: {result.error}", file=sys.stderr)
        return 1
    print(f"Sent ({result.status_code})")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
