"""Batch submission helpers.

Provider-independent parts of the batch lifecycle: submission limits,
correlation id derivation, completion window calculation and JSONL
encoding. The provider-specific steps (upload, create, poll, download)
live in the batch-capable provider.

Correlation ids
---------------

Each batch item gets one correlation id, which the provider echoes back on
the matching output line::

    item.id = "order-42"                   -> "order42"
    agent "Summariser", batch "daily #3"   -> "Summariser_daily3_1718000000000_0"
    no names                               -> "1718000000000_0"

Ids are not deduplicated. Two items supplying the same id produce two
output lines with the same id.
"""

from __future__ import annotations

import json
import math
import re
import time
from collections.abc import Iterable, Sequence
from typing import Any

from llm_agents.batch_types import BatchItem
from llm_agents.errors import RequestValidationError

MAX_BATCH_REQUESTS = 50_000
"""Maximum number of items in one batch."""

MAX_BATCH_PAYLOAD_BYTES = 200_000_000
"""Maximum size of the encoded JSONL payload."""

MAX_MESSAGES_PER_REQUEST = 2048
"""Maximum number of messages in one batch item."""

DEFAULT_COMPLETION_WINDOW_HOURS = 24
MIN_COMPLETION_WINDOW_HOURS = 1
MAX_COMPLETION_WINDOW_HOURS = 24

_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]")


def sanitise_id(value: str) -> str:
    """Strip every non-alphanumeric character from ``value``."""
    return _NON_ALPHANUMERIC.sub("", value)


def derive_request_ids(
    items: Sequence[BatchItem],
    *,
    batch_name: str | None = None,
    agent_name: str | None = None,
    timestamp_ms: int | None = None,
) -> list[str]:
    """Derive one correlation id per batch item, in submission order.

    An item's own id wins when it is non-empty after sanitising. Otherwise
    the id is ``<timestamp>_<index>`` prefixed by the sanitised batch name
    and then the sanitised agent name, when given.

    Args:
        items: Batch items in submission order.
        batch_name: Optional batch name prefix.
        agent_name: Optional agent name prefix.
        timestamp_ms: Timestamp shared by the batch; defaults to now.

    Returns:
        Correlation ids, one per item.

    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)

    prefix = ""
    if batch_name:
        prefix = f"{sanitise_id(batch_name)}_{prefix}"
    if agent_name:
        prefix = f"{sanitise_id(agent_name)}_{prefix}"

    request_ids: list[str] = []
    for index, item in enumerate(items):
        own_id = sanitise_id(item.id) if item.id else ""
        request_ids.append(own_id or f"{prefix}{timestamp_ms}_{index}")
    return request_ids


def completion_window(timeout_seconds: int | None) -> str:
    """Convert a timeout in seconds into a provider completion window.

    Rounds up to whole hours and clamps to 1-24 hours. Defaults to 24 hours
    when no timeout is given.
    """
    if not timeout_seconds:
        return f"{DEFAULT_COMPLETION_WINDOW_HOURS}h"
    hours = math.ceil(timeout_seconds / 3600)
    hours = min(max(hours, MIN_COMPLETION_WINDOW_HOURS), MAX_COMPLETION_WINDOW_HOURS)
    return f"{hours}h"


def validate_batch_items(items: Sequence[BatchItem]) -> None:
    """Check batch size and per-item message counts.

    Raises:
        RequestValidationError: If the batch is empty or too large, or an
            item is empty or has too many messages.

    """
    if not items:
        raise RequestValidationError("A batch must contain at least one request")
    if len(items) > MAX_BATCH_REQUESTS:
        raise RequestValidationError(
            f"Maximum number of requests in a batch is {MAX_BATCH_REQUESTS}"
        )
    for index, item in enumerate(items):
        if not item.messages:
            raise RequestValidationError(f"Prompt {index} is empty")
        if len(item.messages) > MAX_MESSAGES_PER_REQUEST:
            raise RequestValidationError(
                f"Prompt {index} exceeds the maximum number of messages "
                f"({MAX_MESSAGES_PER_REQUEST})"
            )


def encode_jsonl(lines: Iterable[dict[str, Any]]) -> bytes:
    """Encode request lines as a JSONL document within the payload limit.

    Raises:
        RequestValidationError: If the encoded document exceeds
            ``MAX_BATCH_PAYLOAD_BYTES``.

    """
    chunks: list[bytes] = []
    size = 0
    for line in lines:
        chunk = json.dumps(line).encode("utf-8") + b"\n"
        size += len(chunk)
        if size > MAX_BATCH_PAYLOAD_BYTES:
            raise RequestValidationError(
                f"The total size of the batch requests exceeds "
                f"{MAX_BATCH_PAYLOAD_BYTES} bytes"
            )
        chunks.append(chunk)
    return b"".join(chunks)
