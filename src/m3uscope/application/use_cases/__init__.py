from .analyze_playlist import AnalyzePlaylistUseCase
from .check_channel import CheckChannelUseCase
from .fetch_playlist import FetchPlaylistUseCase
from .validate_playlist import ValidatePlaylistUseCase

__all__ = [
    "AnalyzePlaylistUseCase",
    "CheckChannelUseCase",
    "FetchPlaylistUseCase",
    "ValidatePlaylistUseCase",
]
