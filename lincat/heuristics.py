"""
Deterministic categorization rules that short-circuit the language model
"""
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from .link_extractor import is_url
from .logging_config import get_logger
from .models import ClassificationVerdict

logger = get_logger("heuristics")

DEFAULT_URL_CATEGORY = "General"
DEFAULT_NOTE_CATEGORY = "Personal Notes"


def _domain_pattern(domain: str) -> re.Pattern:
    # Matches the domain or any subdomain of it, but not a longer host
    # that merely ends with the same letters (x.com inside dropbox.com).
    return re.compile(r"(?<![\w.-])(?:[\w-]+\.)*" + re.escape(domain) + r"(?![\w-])")


@dataclass(frozen=True)
class Rule:
    """One heuristic: a fixed category and the triggers that select it"""
    category: str
    rationale: str
    domains: Tuple[str, ...] = ()
    keywords: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "_patterns", tuple(_domain_pattern(d) for d in self.domains))

    def matches(self, lowered_input: str, lowered_content: str) -> bool:
        if any(p.search(lowered_input) for p in self._patterns):
            return True
        return any(k in lowered_content for k in self.keywords)


# Order matters: domain rules first, then keyword rules.
RULES: Tuple[Rule, ...] = (
    Rule("Code Repositories", "Code repository: {subject}",
         domains=("github.com", "gitlab.com", "bitbucket.org", "codeberg.org")),
    Rule("YouTube Videos", "YouTube video: {subject}",
         domains=("youtube.com", "youtu.be")),
    Rule("Vimeo Videos", "Vimeo video: {subject}",
         domains=("vimeo.com",)),
    Rule("Twitter Posts", "Twitter/X profile or post: {subject}",
         domains=("twitter.com", "x.com")),
    Rule("LinkedIn Profiles", "LinkedIn profile or post: {subject}",
         domains=("linkedin.com",)),
    Rule("Facebook Content", "Facebook profile or post: {subject}",
         domains=("facebook.com", "fb.com")),
    Rule("Tasks & Reminders", "Task or reminder: {input}",
         keywords=("todo", "to-do", "task", "reminder")),
    Rule("Recipes & Cooking", "Recipe or cooking content: {subject}",
         keywords=("recipe", "cooking", "ingredient")),
)


class HeuristicClassifier:
    """Ordered substring rules; the first matching rule wins."""

    def __init__(self, rules: Sequence[Rule] = RULES):
        self.rules = tuple(rules)

    def classify(
        self,
        raw_input: str,
        title: str,
        description: str,
        existing_categories: Iterable[str],
    ) -> Optional[ClassificationVerdict]:
        """Return a verdict from the first matching rule, or None to defer to the model."""
        lowered_input = raw_input.lower()
        lowered_content = f"{title} {description}".lower()

        for rule in self.rules:
            if rule.matches(lowered_input, lowered_content):
                logger.debug("Heuristic rule %r matched", rule.category)
                return ClassificationVerdict(
                    category=rule.category,
                    description=rule.rationale.format(subject=title or raw_input, input=raw_input),
                    is_new=rule.category not in set(existing_categories),
                )
        return None

    @staticmethod
    def default_verdict(
        raw_input: str,
        title: str,
        existing_categories: Iterable[str],
    ) -> ClassificationVerdict:
        """Lowest-priority bucket: General for links, Personal Notes for text."""
        subject = title or raw_input
        if is_url(raw_input):
            category = DEFAULT_URL_CATEGORY
            description = f"Content: {subject}"
        else:
            category = DEFAULT_NOTE_CATEGORY
            description = f"Note: {subject}"
        return ClassificationVerdict(
            category=category,
            description=description,
            is_new=category not in set(existing_categories),
        )
