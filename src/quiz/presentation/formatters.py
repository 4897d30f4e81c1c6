import re
from dataclasses import dataclass
from urllib.parse import quote

from src.config import GameConfig

_COUNT_RE = re.compile(r"count\s*(\d)-(\d)", re.IGNORECASE)
_BASE_WORDS = ("base", "runner", "loaded", "empty")


def level_label(rating: int) -> str:
    """Named skill band for a rating. The number itself is never shown."""
    for threshold, label in GameConfig.LEVEL_LABELS:
        if rating >= threshold:
            return label
    return GameConfig.LEVEL_LABEL_DEFAULT


# --- Sharing ---
@dataclass(frozen=True)
class ShareText:
    twitter: str
    line: str


def build_share_text(
    correct_count: int,
    total_questions: int,
    accuracy: float,
    url: str = GameConfig.APP_URL,
    rating: int | None = None,
) -> ShareText:
    # Half-up: 72.5 -> 73
    accuracy_pct = int(accuracy + 0.5)
    result_line = (
        f"Result: {correct_count}/{total_questions} correct ({accuracy_pct}%)"
    )
    rating_line = [f"Rating {rating}"] if rating is not None else []

    twitter = "\n".join(
        [
            "Today's pitch: what would you call?",
            result_line,
            *rating_line,
            "",
            "▼ Your turn",
            url,
            "",
            "#TodaysPitch #BaseballIQ #BaseballQuiz",
        ]
    )
    line = "\n".join(
        [
            f"⚾ {GameConfig.APP_TITLE}",
            f"{accuracy_pct}% correct ({correct_count}/{total_questions})",
            *rating_line,
            "Give it a try 👇",
            url,
        ]
    )
    return ShareText(twitter=twitter, line=line)


def twitter_share_url(text: str) -> str:
    return f"https://twitter.com/intent/tweet?text={quote(text, safe='')}"


def line_share_url(text: str, url: str) -> str:
    return (
        "https://social-plugins.line.me/lineit/share"
        f"?url={quote(url, safe='')}&text={quote(text, safe='')}"
    )


# --- Question Display ---
def parse_count(count: str) -> tuple[int, int] | None:
    """'Count 1-2' -> (balls, strikes). None when the text has no count."""
    match = _COUNT_RE.search(count.strip())
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def format_count_short(balls: int, strikes: int) -> str:
    return f"B{balls} S{strikes}"


def split_situation(situation: str) -> tuple[str, str] | None:
    """
    'Bottom 9th, two outs, bases loaded' -> ('Bottom 9th, two outs',
    'bases loaded'). Returns None unless there are at least three parts and
    the last one describes the bases.
    """
    parts = [p.strip() for p in situation.split(",")]
    if len(parts) < 3:
        return None
    last = parts[-1]
    if not any(word in last.lower() for word in _BASE_WORDS):
        return None
    return ", ".join(parts[:-1]), last
