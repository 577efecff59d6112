"""JSON presentation of playlist domain objects (camelCase wire format)."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from m3uscope.domain.entities import (
    AnalysisResult,
    Channel,
    ChannelCheckReport,
    PlaylistError,
)


def _iso(ts: datetime | None) -> str | None:
    if ts is None:
        return None
    return ts.isoformat().replace("+00:00", "Z")


def present_channel(channel: Channel) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": channel.name,
        "group": channel.group,
        "url": channel.url,
        "status": channel.status,
        "httpStatus": channel.http_status,
        "responseTime": channel.response_time,
        "contentType": channel.content_type,
    }
    if channel.error:
        data["error"] = channel.error
    return data


def present_analysis(result: AnalysisResult) -> dict[str, Any]:
    s = result.summary
    return {
        "url": result.url,
        "isHttp": result.is_http,
        "timestamp": _iso(result.timestamp),
        "summary": {
            "totalChannels": s.total_channels,
            "checkedChannels": s.checked_channels,
            "liveChannels": s.live_channels,
            "deadChannels": s.dead_channels,
            "uncheckedChannels": s.unchecked_channels,
            "livePercentage": s.live_percentage,
            "avgResponseTime": s.avg_response_time,
            "groupCount": s.group_count,
        },
        "groups": [{"name": g.name, "count": g.count} for g in result.groups],
        "channels": [present_channel(ch) for ch in result.channels],
    }


def present_channel_check(report: ChannelCheckReport) -> dict[str, Any]:
    return {
        "url": report.url,
        "status": report.status,
        "httpStatus": report.http_status,
        "responseTime": report.response_time,
        "contentType": report.content_type,
        "urlValid": True,
        "protocol": report.protocol,
        "streamType": report.stream_type,
        "server": report.server,
        "timestamp": _iso(report.timestamp),
    }


def present_error(exc: PlaylistError) -> dict[str, str]:
    return {"error": exc.message, "reason": exc.reason}
