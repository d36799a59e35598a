"""
Key-value encoder for JSON sub-payloads.

Context and unstructured-event JSON may be sent base64 encoded so that it
survives as a single query parameter.
"""

import base64


def base64_encode(text: str) -> str:
    """
    Encode text with the URL-safe base64 alphabet and strip the padding.

    Args:
        text: Serialized JSON text

    Returns:
        URL-safe base64 string without trailing ``=``

    Raises:
        UnicodeEncodeError: If the text cannot be encoded as UTF-8
    """
    encoded = base64.urlsafe_b64encode(text.encode("utf-8"))
    return encoded.decode("ascii").rstrip("=")


def base64_decode(encoded: str) -> str:
    """Reverse ``base64_encode``, restoring any stripped padding."""
    padding = "=" * (-len(encoded) % 4)
    return base64.urlsafe_b64decode(encoded + padding).decode("utf-8")
