"""
Collection of the availability rules that apply to one business and date.
"""

import logging
from datetime import date
from typing import List

from ..domain.models import AvailabilityRule, Weekday
from .protocols import RuleStore

logger = logging.getLogger(__name__)


class RuleResolver:
    """
    Unions the weekly, specific-date and date-range rules for a date.

    Activity and type filtering is delegated to the store queries; the
    result is unordered and later merged, never ranked.
    """

    def __init__(self, rule_store: RuleStore):
        self._rule_store = rule_store

    def resolve(self, business_id: str, day: date) -> List[AvailabilityRule]:
        rules: List[AvailabilityRule] = []
        rules.extend(self._rule_store.find_weekly_rules(business_id, Weekday.from_date(day)))
        rules.extend(self._rule_store.find_specific_date_rules(business_id, day))
        rules.extend(self._rule_store.find_date_range_rules(business_id, day))

        logger.debug("Resolved %d rules for business %s on %s", len(rules), business_id, day)
        return rules
