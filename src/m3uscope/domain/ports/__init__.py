from .batch_prober import BatchProberPort
from .channel_prober import ChannelProberPort
from .playlist_fetcher import PlaylistFetcherPort

__all__ = ["BatchProberPort", "ChannelProberPort", "PlaylistFetcherPort"]
