"""Rule-based symptom classifier.

The rule table lives in ``config/condition_rules.yaml`` and is loaded once per
process. Rules are evaluated in file order and the first one that matches
decides the Recommendation. Keyword checks run on a lowercased copy of the
text; lab-value checks run on the original text and are plain regex searches
over digit substrings (``"140"`` matches anywhere, not only next to "blood
pressure").
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Pattern, Tuple

import yaml

from symptom_intake.schemas.recommendation import Recommendation, RuleSummary

CONFIG_PATH = Path(__file__).parent.parent / "config" / "condition_rules.yaml"


def _keyword_pattern(keywords) -> Optional[Pattern[str]]:
    if not keywords:
        return None
    return re.compile("|".join(re.escape(k.lower()) for k in keywords))


@dataclass(frozen=True)
class Condition:
    """Lab-value flag inside a panel rule."""

    name: str
    keyword_pattern: Pattern[str]
    value_pattern: Pattern[str]

    def matches(self, lowered: str, original: str) -> bool:
        return bool(self.keyword_pattern.search(lowered)) and bool(self.value_pattern.search(original))


@dataclass(frozen=True)
class Rule:
    key: str
    keywords: Tuple[str, ...]
    keyword_pattern: Optional[Pattern[str]]
    conditions: Tuple[Condition, ...]
    recommendation: Recommendation

    @property
    def unconditional(self) -> bool:
        return self.keyword_pattern is None and not self.conditions

    def evaluate(self, lowered: str, original: str) -> Optional[Recommendation]:
        if self.keyword_pattern is not None and not self.keyword_pattern.search(lowered):
            return None
        if not self.conditions:
            return self.recommendation.model_copy()

        names = [c.name for c in self.conditions if c.matches(lowered, original)]
        if not names:
            # keyword hit without a lab value: fall through to the next rule
            return None
        template = self.recommendation
        return template.model_copy(
            update={
                "disease": f"{template.disease} / {' + '.join(names)}",
                "description": template.description.format(conditions=", ".join(names)),
            }
        )


def _build_rule(raw: dict) -> Rule:
    keywords = tuple(raw.get("keywords") or ())
    conditions = tuple(
        Condition(
            name=c["name"],
            keyword_pattern=_keyword_pattern(c["keywords"]),
            value_pattern=re.compile(c["value_pattern"]),
        )
        for c in raw.get("conditions") or ()
    )
    return Rule(
        key=raw["key"],
        keywords=keywords,
        keyword_pattern=_keyword_pattern(keywords),
        conditions=conditions,
        recommendation=Recommendation.model_validate(raw["recommendation"]),
    )


def parse_rules(document: dict) -> Tuple[Rule, ...]:
    """Build the ordered rule table from a parsed YAML document.

    The last rule must be unconditional so that every input gets a result.
    """
    entries = (document or {}).get("rules") or []
    rules = tuple(_build_rule(raw) for raw in entries)
    if not rules or not rules[-1].unconditional:
        raise ValueError("rule table must end with an unconditional default rule")
    for rule in rules[:-1]:
        if rule.unconditional:
            raise ValueError(f"rule '{rule.key}' has no keywords and would shadow later rules")
    return rules


@lru_cache(maxsize=1)
def load_rules() -> Tuple[Rule, ...]:
    with open(CONFIG_PATH, "r", encoding="utf-8") as f:
        return parse_rules(yaml.safe_load(f))


def classify_with_rule(symptoms_text: str, rules: Optional[Tuple[Rule, ...]] = None) -> Tuple[str, Recommendation]:
    """Return the key of the rule that fired together with its Recommendation."""
    original = symptoms_text or ""
    lowered = original.lower()
    for rule in rules if rules is not None else load_rules():
        result = rule.evaluate(lowered, original)
        if result is not None:
            return rule.key, result
    raise RuntimeError("rule table has no default entry")


def classify(symptoms_text: str) -> Recommendation:
    return classify_with_rule(symptoms_text)[1]


def list_rules() -> List[RuleSummary]:
    return [
        RuleSummary(
            key=rule.key,
            keywords=rule.keywords,
            disease=rule.recommendation.disease,
            severity=rule.recommendation.severity,
            conditions=tuple(c.name for c in rule.conditions),
        )
        for rule in load_rules()
    ]


__all__ = ["classify", "classify_with_rule", "list_rules", "load_rules", "parse_rules"]
