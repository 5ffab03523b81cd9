"""
Unit tests for the M3U parser.
"""

from iptv_viewer.services.m3u_parser import M3UParser
from tests.conftest import SAMPLE_PLAYLIST


class TestParse:
    """Line-by-line parsing behaviour."""

    def test_single_channel_with_group(self):
        channels = M3UParser.parse('#EXTINF:-1 group-title="News",CNN\nhttp://x/y.m3u8\n')

        assert len(channels) == 1
        channel = channels[0]
        assert channel.id == 1
        assert channel.name == "CNN"
        assert channel.category == "News"
        assert channel.url == "http://x/y.m3u8"
        assert channel.is_live is True

    def test_sample_playlist_order_and_defaults(self):
        channels = M3UParser.parse(SAMPLE_PLAYLIST)

        assert [ch.id for ch in channels] == [1, 2, 3]
        assert [ch.name for ch in channels] == ["CNN", "ESPN", "Cartoon Network"]
        assert channels[0].logo == "http://logos/cnn.png"
        assert channels[1].logo is None
        assert channels[2].category == "General"

    def test_name_is_text_after_last_comma(self):
        channels = M3UParser.parse('#EXTINF:-1 tvg-name="A, B",Foo, Bar  \nhttp://x/1.m3u8')

        assert channels[0].name == "Bar"

    def test_metadata_without_comma_gets_placeholder(self):
        channels = M3UParser.parse("#EXTINF:-1\nhttp://x/1.m3u8")

        assert channels[0].name == "Unknown Channel"

    def test_empty_name_falls_back_to_channel_id(self):
        channels = M3UParser.parse("#EXTINF:-1,One\nhttp://x/1.m3u8\n#EXTINF:-1,\nhttp://x/2.m3u8")

        assert channels[1].name == "Channel 2"

    def test_consecutive_metadata_lines_keep_only_the_last(self):
        content = "#EXTINF:-1,First\n#EXTINF:-1,Second\nhttp://x/2.m3u8\n"

        channels = M3UParser.parse(content)

        assert [ch.name for ch in channels] == ["Second"]

    def test_metadata_without_url_emits_nothing(self):
        assert M3UParser.parse("#EXTINF:-1,Lonely\n") == []

    def test_url_without_metadata_is_ignored(self):
        channels = M3UParser.parse("http://x/orphan.m3u8\n#EXTINF:-1,Real\nhttp://x/real.m3u8")

        assert [ch.url for ch in channels] == ["http://x/real.m3u8"]

    def test_pending_name_survives_unrelated_lines(self):
        content = "#EXTINF:-1,Opts\n#EXTVLCOPT:http-user-agent=x\n\nrtmp://nope\nhttp://x/1.m3u8"

        channels = M3UParser.parse(content)

        assert len(channels) == 1
        assert channels[0].url == "http://x/1.m3u8"

    def test_url_prefix_is_case_sensitive(self):
        assert M3UParser.parse("#EXTINF:-1,Upper\nHTTP://x/1.m3u8") == []

    def test_duplicate_urls_are_kept_with_distinct_ids(self):
        content = "#EXTINF:-1,A\nhttp://x/same.m3u8\n#EXTINF:-1,B\nhttp://x/same.m3u8"

        channels = M3UParser.parse(content)

        assert [ch.id for ch in channels] == [1, 2]

    def test_crlf_line_endings(self):
        channels = M3UParser.parse("#EXTINF:-1,Win\r\nhttp://x/1.m3u8\r\n")

        assert channels[0].name == "Win"
        assert channels[0].url == "http://x/1.m3u8"

    def test_empty_input(self):
        assert M3UParser.parse("") == []
        assert M3UParser.parse("#EXTM3U\n\n") == []


class TestBounds:
    """Channel cap and repeatability."""

    def test_stops_at_cap(self):
        entry = "#EXTINF:-1,Ch\nhttp://x/{}.m3u8\n"
        content = "".join(entry.format(i) for i in range(M3UParser.MAX_CHANNELS + 50))

        channels = M3UParser.parse(content)

        assert len(channels) == M3UParser.MAX_CHANNELS
        assert channels[-1].id == M3UParser.MAX_CHANNELS

    def test_custom_cap(self):
        channels = M3UParser.parse(SAMPLE_PLAYLIST, max_channels=2)

        assert [ch.id for ch in channels] == [1, 2]

    def test_parsing_twice_gives_identical_output(self):
        assert M3UParser.parse(SAMPLE_PLAYLIST) == M3UParser.parse(SAMPLE_PLAYLIST)
