"""
Basic import tests to verify the core functionality.
"""


def test_package_imports():
    """Test that the public API can be imported."""
    from snowplow_tracker import (
        Tracker,
        EventPayload,
        EventType,
        TransactionItem,
        RequestsEmitter,
        CollectingEmitter,
        ContractError,
        MalformedJsonError,
        base64_encode,
        __version__,
    )

    assert callable(base64_encode)
    assert __version__.startswith("py-")
    assert issubclass(ContractError, ValueError)
    assert issubclass(MalformedJsonError, ValueError)

    item = TransactionItem(sku="sku-1")
    assert item.price is None

    tracker = Tracker(CollectingEmitter(), "ns", "app")
    assert isinstance(tracker.payload, EventPayload)


def test_cli_imports():
    """Test that the command line module can be imported."""
    from track_event import main

    assert callable(main)
