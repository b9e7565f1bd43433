"""
Intent classifiers - keyword matching over the lower-cased message.

Matching is plain substring containment, not word-boundary matching:
"okays" counts as positive and "finesse" contains "fine".
"""

from typing import Optional, Tuple

NEWS_KEYWORDS: Tuple[str, ...] = ("news", "latest", "headlines", "today", "khabar")

POSITIVE_KEYWORDS: Tuple[str, ...] = (
    "yes", "sure", "ok", "please", "generate", "yep", "okay", "fine",
    "haan",  # Hindi
)

GRATITUDE_KEYWORDS: Tuple[str, ...] = (
    "thank", "thanks", "helpful", "appreciate",
    "shukriya", "dhanyavaad",  # Hindi / Urdu
)

# Guest mode: small talk answered without an account
GUEST_GREETING_KEYWORDS: Tuple[str, ...] = ("hello", "hii", "hey")
GUEST_FAREWELL_KEYWORDS: Tuple[str, ...] = ("bye", "goodbye")
GUEST_SIMPLE_KEYWORDS: Tuple[str, ...] = (
    GUEST_GREETING_KEYWORDS + GUEST_FAREWELL_KEYWORDS + ("thank", "thanks")
)


def _contains_any(text: str, keywords: Tuple[str, ...]) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


def is_news_intent(text: str) -> bool:
    """User is asking for news / headlines."""
    return _contains_any(text, NEWS_KEYWORDS)


def is_positive_intent(text: str) -> bool:
    """User agrees to the pending offer."""
    return _contains_any(text, POSITIVE_KEYWORDS)


def is_gratitude_intent(text: str) -> bool:
    """User is thanking / wrapping up."""
    return _contains_any(text, GRATITUDE_KEYWORDS)


def guest_reply(text: str) -> Optional[str]:
    """
    Canned reply for a guest's small talk.

    Returns None when the message needs a logged-in account.
    """
    if not _contains_any(text, GUEST_SIMPLE_KEYWORDS):
        return None
    if _contains_any(text, GUEST_GREETING_KEYWORDS):
        return "Hello! To access my full capabilities, please log in or sign up."
    if _contains_any(text, GUEST_FAREWELL_KEYWORDS):
        return "Goodbye! Hope to see you again as a registered user."
    return "You're welcome! Please log in to access all features."
