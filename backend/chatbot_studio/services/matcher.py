"""
Intent and FAQ reply selection.

Matching is a case-insensitive substring test of each rule's trigger
against the inbound message. Rules are scanned in the order given; the
caller decides that order.
"""
from typing import Iterable, Optional, Protocol, Sequence


class IntentRule(Protocol):
    patterns: Sequence[str]
    response: str
    enabled: bool


class FAQRule(Protocol):
    question: str
    answer: str
    enabled: bool


def _contains(message: str, trigger: str) -> bool:
    return trigger.lower() in message.lower()


def match_intent(intents: Iterable[IntentRule], message: str) -> Optional[IntentRule]:
    """Return the first enabled intent with any pattern contained in the message."""
    for intent in intents:
        if not intent.enabled:
            continue
        if any(_contains(message, pattern) for pattern in intent.patterns or []):
            return intent
    return None


def match_faq(faqs: Iterable[FAQRule], message: str) -> Optional[FAQRule]:
    """Return the first enabled FAQ whose question is contained in the message."""
    for faq in faqs:
        if faq.enabled and _contains(message, faq.question):
            return faq
    return None


def select_reply(
    message: str,
    welcome_message: str,
    intents: Iterable[IntentRule],
    faqs: Iterable[FAQRule],
) -> str:
    """
    Choose the reply for an inbound message.

    The welcome message is the fallback. An intent match replaces it, and
    the FAQ scan always runs afterwards, so an FAQ match overrides an
    intent match.

    Args:
        message: Raw inbound message text
        welcome_message: Bot's configured welcome message
        intents: Intents in scan order (disabled ones are skipped)
        faqs: FAQs in scan order (disabled ones are skipped)

    Returns:
        Reply text
    """
    reply = welcome_message

    intent = match_intent(intents, message)
    if intent is not None:
        reply = intent.response

    faq = match_faq(faqs, message)
    if faq is not None:
        reply = faq.answer

    return reply
