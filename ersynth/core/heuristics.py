"""Rule-based synthesis of a single column value.

Rules are held in an ordered table of (predicate, generator) pairs and the
first matching rule wins. The order is part of the contract: reordering it
changes which value family every column receives.
"""

import random
import string
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, List, Optional, Sequence, Tuple

from faker import Faker

from .models import ColumnInfo


@dataclass(frozen=True)
class ValueRule:
    """A named predicate/generator pair in the heuristics rule table."""
    name: str
    predicate: Callable[[ColumnInfo], bool]
    generator: Callable[["ValueHeuristics", ColumnInfo, int], Any]


def _name_contains(*fragments: str) -> Callable[[ColumnInfo], bool]:
    def predicate(column: ColumnInfo) -> bool:
        lowered = column.name.lower()
        return any(fragment in lowered for fragment in fragments)
    return predicate


def _type_contains(*fragments: str) -> Callable[[ColumnInfo], bool]:
    def predicate(column: ColumnInfo) -> bool:
        declared = column.data_type.upper()
        return any(fragment in declared for fragment in fragments)
    return predicate


def _is_own_primary_key(column: ColumnInfo) -> bool:
    return column.primary_key and not column.is_foreign_key


def _is_foreign_key(column: ColumnInfo) -> bool:
    return column.is_foreign_key


def _always(column: ColumnInfo) -> bool:
    return True


class ValueHeuristics:
    """Maps a column's name, type and key role to a synthesized value."""

    def __init__(self, rng: Optional[random.Random] = None, faker: Optional[Faker] = None,
                 reference_date: Optional[datetime] = None,
                 flag_values: Sequence[str] = ("Y", "N")):
        self.rng = rng or random.Random()
        self.faker = faker or Faker()
        self.reference_date = reference_date
        self.flag_values = tuple(flag_values)
        self.rules: List[ValueRule] = list(DEFAULT_RULES)

    def match_rule(self, column: ColumnInfo) -> ValueRule:
        """Return the first rule whose predicate accepts the column."""
        for rule in self.rules:
            if rule.predicate(column):
                return rule
        raise LookupError(f"No value rule matched column {column.name}")

    def generate(self, column: ColumnInfo, index: int) -> Any:
        """Synthesize a value for the column at the given 1-based row index."""
        rule = self.match_rule(column)
        return rule.generator(self, column, index)

    # Value families

    def row_index(self, column: ColumnInfo, index: int) -> int:
        return index

    def date_value(self, column: ColumnInfo, index: int) -> str:
        """A date within the past year, day-of-month capped at 28."""
        now = self.reference_date or datetime.now()
        months_back = self.rng.randrange(12)
        year, month_zero = divmod(now.year * 12 + now.month - 1 - months_back, 12)
        value = now.replace(year=year, month=month_zero + 1, day=self.rng.randint(1, 28))

        if "time" in column.name.lower():
            return value.isoformat(timespec="seconds")
        return value.date().isoformat()

    def email(self, column: ColumnInfo, index: int) -> str:
        return self.faker.email()

    def phone(self, column: ColumnInfo, index: int) -> str:
        return self.faker.phone_number()

    def name_value(self, column: ColumnInfo, index: int) -> str:
        lowered = column.name.lower()
        if "staff" in lowered or "user" in lowered:
            return self.faker.name()
        if "company" in lowered or "agency" in lowered or "client" in lowered:
            return self.faker.company()
        return " ".join(self.faker.words(3))

    def money(self, column: ColumnInfo, index: int) -> float:
        return round(self.rng.uniform(5000, 55000), 2)

    def sentence(self, column: ColumnInfo, index: int) -> str:
        return self.faker.sentence()

    def code(self, column: ColumnInfo, index: int) -> str:
        return "".join(self.rng.choices(string.ascii_uppercase + string.digits, k=5))

    def flag(self, column: ColumnInfo, index: int) -> str:
        yes, no = self.flag_values
        return yes if self.rng.random() > 0.3 else no

    def small_integer(self, column: ColumnInfo, index: int) -> int:
        return self.rng.randint(1, 100)

    def bounded_decimal(self, column: ColumnInfo, index: int) -> float:
        return round(self.rng.uniform(0, 1000), 2)

    def short_text(self, column: ColumnInfo, index: int) -> str:
        return " ".join(self.faker.words(2))

    def boolean(self, column: ColumnInfo, index: int) -> bool:
        return self.rng.random() > 0.5

    def word(self, column: ColumnInfo, index: int) -> str:
        return self.faker.word()


DEFAULT_RULES: Tuple[ValueRule, ...] = (
    ValueRule("primary_key", _is_own_primary_key, ValueHeuristics.row_index),
    # Resolved against parent rows by the generator; the index is the fallback
    ValueRule("foreign_key", _is_foreign_key, ValueHeuristics.row_index),
    ValueRule("date", _name_contains("date", "time"), ValueHeuristics.date_value),
    ValueRule("email", _name_contains("email"), ValueHeuristics.email),
    ValueRule("phone", _name_contains("phone"), ValueHeuristics.phone),
    ValueRule("name", _name_contains("name", "details"), ValueHeuristics.name_value),
    ValueRule("money", _name_contains("amount", "price", "cost"), ValueHeuristics.money),
    ValueRule("sentence", _name_contains("description", "purpose", "other"), ValueHeuristics.sentence),
    ValueRule("code", _name_contains("code"), ValueHeuristics.code),
    ValueRule("flag", _name_contains("_yn", "active", "enabled"), ValueHeuristics.flag),
    ValueRule("integer_type", _type_contains("INT", "NUMBER"), ValueHeuristics.small_integer),
    ValueRule("decimal_type", _type_contains("DECIMAL", "FLOAT", "DOUBLE"), ValueHeuristics.bounded_decimal),
    ValueRule("text_type", _type_contains("CHAR", "TEXT"), ValueHeuristics.short_text),
    ValueRule("boolean_type", _type_contains("BOOL"), ValueHeuristics.boolean),
    ValueRule("default", _always, ValueHeuristics.word),
)
