"""Stream router: which IRC channels a log message goes to."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from loguru import logger

from ircoutput.models import LogMessage

StreamChannelConfig = Mapping[str, Iterable[Mapping[str, str]]]

CHANNEL_KEY = "channel"


def resolve_channels(message: LogMessage, stream_config: StreamChannelConfig | None) -> list[str]:
    """Return distinct channels for message, in first-seen order.

    Streams missing from stream_config and records without a channel are skipped.
    A channel reached through more than one stream or record appears once.
    """
    if not stream_config:
        return []

    channels: list[str] = []
    seen: set[str] = set()
    for stream_id in message.stream_ids:
        records = stream_config.get(stream_id)
        if records is None:
            logger.debug("Stream {} has no output config; skip", stream_id)
            continue
        for record in records:
            channel = record.get(CHANNEL_KEY) if record else None
            if not channel:
                logger.debug("Stream {} record without channel; skip", stream_id)
                continue
            if channel not in seen:
                seen.add(channel)
                channels.append(channel)
    return channels
