from .limits import DEFAULT_LIMITS, PlaylistLimits
from .playlist import (
    DEFAULT_GROUP,
    AnalysisOptions,
    AnalysisResult,
    AnalysisSummary,
    Channel,
    ChannelCheckReport,
    ChannelStatus,
    EmptyPlaylist,
    FetchedPlaylist,
    FetchFailure,
    GroupCount,
    InvalidInput,
    PlaylistError,
    PlaylistValidation,
    ProbeOutcome,
)

__all__ = [
    "DEFAULT_GROUP",
    "DEFAULT_LIMITS",
    "AnalysisOptions",
    "AnalysisResult",
    "AnalysisSummary",
    "Channel",
    "ChannelCheckReport",
    "ChannelStatus",
    "EmptyPlaylist",
    "FetchFailure",
    "FetchedPlaylist",
    "GroupCount",
    "InvalidInput",
    "PlaylistError",
    "PlaylistLimits",
    "PlaylistValidation",
    "ProbeOutcome",
]
