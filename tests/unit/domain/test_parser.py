"""Tests for the M3U playlist parser."""

from __future__ import annotations

from m3uscope.domain.entities import DEFAULT_GROUP, PlaylistLimits
from m3uscope.domain.playlist.parser import parse_extinf_attributes, parse_playlist


class TestParseExtinfAttributes:
    def test_extracts_quoted_pairs(self) -> None:
        attrs = parse_extinf_attributes(
            '-1 tvg-id="cnn.us" tvg-logo="http://x/l.png" group-title="News",CNN'
        )
        assert attrs == {
            "tvg-id": "cnn.us",
            "tvg-logo": "http://x/l.png",
            "group-title": "News",
        }

    def test_keys_are_lowercased(self) -> None:
        attrs = parse_extinf_attributes('-1 Group-Title="Sports",ESPN')
        assert attrs["group-title"] == "Sports"

    def test_later_duplicate_wins(self) -> None:
        attrs = parse_extinf_attributes('-1 group-title="A" group-title="B",X')
        assert attrs["group-title"] == "B"

    def test_unterminated_quote_is_skipped(self) -> None:
        attrs = parse_extinf_attributes('-1 tvg-id="abc group-title,Name')
        assert "tvg-id" not in attrs

    def test_no_attributes(self) -> None:
        assert parse_extinf_attributes("-1,Plain") == {}


class TestParsePlaylist:
    def test_two_channels(self, sample_playlist: str) -> None:
        channels = parse_playlist(sample_playlist)

        assert len(channels) == 2
        assert channels[0].name == "CNN"
        assert channels[0].group == "News"
        assert channels[0].url == "http://a.test/cnn"
        assert channels[1].name == "BBC"
        assert channels[1].group == DEFAULT_GROUP
        assert channels[1].url == "https://b.test/bbc"

    def test_parsed_channels_are_unprobed(self, sample_playlist: str) -> None:
        for ch in parse_playlist(sample_playlist):
            assert ch.status == "unknown"
            assert ch.http_status == 0
            assert ch.response_time is None
            assert ch.content_type is None

    def test_empty_input(self) -> None:
        assert parse_playlist("") == []

    def test_header_only(self) -> None:
        assert parse_playlist("#EXTM3U\n") == []

    def test_dangling_extinf_is_dropped(self) -> None:
        text = "#EXTM3U\n#EXTINF:-1,Orphan\n#EXTINF:-1,Real\nhttp://x.test/real\n"
        channels = parse_playlist(text)
        assert [ch.name for ch in channels] == ["Real"]

    def test_trailing_extinf_is_dropped(self) -> None:
        text = "#EXTINF:-1,One\nhttp://x.test/1\n#EXTINF:-1,Lost"
        channels = parse_playlist(text)
        assert len(channels) == 1

    def test_bare_urls_get_ordinal_names(self) -> None:
        text = "#EXTINF:-1,Named\nhttp://x.test/1\nhttp://x.test/2\nhttps://x.test/3"
        channels = parse_playlist(text)
        assert [ch.name for ch in channels] == ["Named", "Channel 2", "Channel 3"]
        assert channels[1].group == DEFAULT_GROUP

    def test_missing_comma_gives_unknown_name(self) -> None:
        channels = parse_playlist('#EXTINF:-1 group-title="Kids"\nhttp://x.test/k')
        assert channels[0].name == "Unknown"
        assert channels[0].group == "Kids"

    def test_name_uses_last_comma(self) -> None:
        channels = parse_playlist(
            '#EXTINF:-1 tvg-name="a,b",Hello, World\nhttp://x.test/h'
        )
        assert channels[0].name == "World"

    def test_empty_group_title_falls_back(self) -> None:
        channels = parse_playlist('#EXTINF:-1 group-title="",X\nhttp://x.test/x')
        assert channels[0].group == DEFAULT_GROUP

    def test_non_http_lines_are_ignored(self) -> None:
        text = (
            "#EXTM3U\n#EXTVLCOPT:http-user-agent=foo\n#EXTINF:-1,A\n"
            "rtmp://x.test/a\nhttp://x.test/a\n"
        )
        channels = parse_playlist(text)
        assert len(channels) == 1
        assert channels[0].url == "http://x.test/a"

    def test_crlf_and_whitespace(self) -> None:
        text = "#EXTM3U\r\n  #EXTINF:-1,Spaced  \r\n  http://x.test/s  \r\n"
        channels = parse_playlist(text)
        assert channels[0].name == "Spaced"
        assert channels[0].url == "http://x.test/s"

    def test_truncates_fields(self) -> None:
        limits = PlaylistLimits(max_name_length=5, max_group_length=3, max_url_length=20)
        text = (
            '#EXTINF:-1 group-title="Documentary",VeryLongName\n'
            "http://x.test/" + "a" * 50
        )
        ch = parse_playlist(text, limits)[0]
        assert ch.name == "VeryL"
        assert ch.group == "Doc"
        assert len(ch.url) == 20

    def test_no_channel_without_url(self, playlist_factory) -> None:
        channels = parse_playlist(playlist_factory(10) + "\n#EXTINF:-1,Tail")
        assert len(channels) == 10
        assert all(ch.url for ch in channels)

    def test_parsing_is_deterministic(self, sample_playlist: str) -> None:
        assert parse_playlist(sample_playlist) == parse_playlist(sample_playlist)
