"""
Minimal Server-Sent Events reader over an httpx line iterator.
"""
from dataclasses import dataclass
from typing import AsyncIterator, List, Optional

@dataclass
class ServerSentEvent:
    event: str
    data: str

async def iter_events(lines: AsyncIterator[str]) -> AsyncIterator[ServerSentEvent]:
    """
    Groups `event:`/`data:` fields into events, dispatched on blank lines.
    Comment lines (pings) are skipped.
    """
    event: Optional[str] = None
    data: List[str] = []
    async for line in lines:
        line = line.rstrip("\r")
        if not line:
            if data:
                yield ServerSentEvent(event=event or "message", data="\n".join(data))
            event, data = None, []
            continue
        if line.startswith(":"):
            continue
        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if field == "event":
            event = value
        elif field == "data":
            data.append(value)
    if data:
        yield ServerSentEvent(event=event or "message", data="\n".join(data))
