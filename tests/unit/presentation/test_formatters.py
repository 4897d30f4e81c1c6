from urllib.parse import unquote

import pytest

from src.quiz.presentation.formatters import (
    build_share_text,
    format_count_short,
    level_label,
    line_share_url,
    parse_count,
    split_situation,
    twitter_share_url,
)


@pytest.mark.parametrize(
    "rating, label",
    [
        (1700, "Above the average pro-ball fan"),
        (1600, "Above the average pro-ball fan"),
        (1500, "Experienced"),
        (1200, "Around average"),
        (1199, "Still growing"),
    ],
)
def test_level_label(rating, label):
    assert level_label(rating) == label


class TestShareText:
    def test_twitter_text(self):
        share = build_share_text(4, 5, 80.0, url="https://x.test")

        assert share.twitter.startswith("Today's pitch: what would you call?")
        assert "Result: 4/5 correct (80%)" in share.twitter
        assert "https://x.test" in share.twitter
        assert share.twitter.endswith("#TodaysPitch #BaseballIQ #BaseballQuiz")

    def test_line_text_includes_rating(self):
        share = build_share_text(3, 5, 60.0, url="https://x.test", rating=1523)

        assert share.line.startswith("⚾ Today's Pitch")
        assert "60% correct (3/5)" in share.line
        assert "Rating 1523" in share.line

    def test_rating_omitted_when_unknown(self):
        assert "Rating" not in build_share_text(3, 5, 60.0).twitter

    def test_accuracy_rounds_half_up(self):
        assert "(73%)" in build_share_text(1, 1, 72.5).twitter

    def test_share_urls_are_encoded(self):
        text = "4/5 correct #BaseballIQ"

        tweet = twitter_share_url(text)
        line = line_share_url(text, "https://x.test/?a=1")

        assert " " not in tweet and "#" not in tweet
        assert unquote(tweet.split("text=")[1]) == text
        assert "url=https%3A%2F%2Fx.test%2F%3Fa%3D1" in line


class TestCountDisplay:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Count 1-2", (1, 2)),
            ("count 3-2, full", (3, 2)),
            ("  COUNT0-0", (0, 0)),
            ("Two outs", None),
            ("", None),
        ],
    )
    def test_parse_count(self, text, expected):
        assert parse_count(text) == expected

    def test_format_count_short(self):
        assert format_count_short(2, 1) == "B2 S1"


class TestSplitSituation:
    def test_splits_off_base_state(self):
        assert split_situation("Bottom 9th, two outs, bases loaded") == (
            "Bottom 9th, two outs",
            "bases loaded",
        )

    def test_needs_three_parts(self):
        assert split_situation("Top 1st, bases empty") is None

    def test_last_part_must_describe_bases(self):
        assert split_situation("Top 1st, two outs, lefty batting") is None
