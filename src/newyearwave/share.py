"""Share link construction. Clipboard and Web Share stay in the browser."""

from urllib.parse import urlencode

from newyearwave.i18n import t

_TWITTER_INTENT = "https://twitter.com/intent/tweet"


def share_text(display_year: int, lang: str = "en") -> str:
    return t("share_text", lang).format(year=display_year)


def twitter_intent_url(text: str, site_url: str) -> str:
    """Tweet intent URL with the text and link percent-encoded."""
    return f"{_TWITTER_INTENT}?{urlencode({'text': text, 'url': site_url})}"
