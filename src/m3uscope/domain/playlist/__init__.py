from .content import looks_like_playlist
from .parser import parse_extinf_attributes, parse_playlist
from .stream_type import detect_stream_type
from .urls import is_http_url, validate_url_format

__all__ = [
    "detect_stream_type",
    "is_http_url",
    "looks_like_playlist",
    "parse_extinf_attributes",
    "parse_playlist",
    "validate_url_format",
]
