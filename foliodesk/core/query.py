"""
Row predicates shared by the store and the visibility filter.

A predicate renders to a SQL fragment for filtered selects and can also be
evaluated against an already-fetched row, so the same rule applies to list
queries and to post-hoc checks on single rows. NULL never matches a
comparison, mirroring SQL three-valued logic.
"""

import re

_IDENTIFIER = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


def _column(name):
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid column name: {name!r}")
    return name


class Predicate:
    def to_sql(self):
        """Return (sql_fragment, params)"""
        raise NotImplementedError

    def matches(self, row):
        raise NotImplementedError


class Eq(Predicate):
    def __init__(self, column, value):
        self.column = _column(column)
        self.value = value

    def to_sql(self):
        return f'{self.column} = ?', [self.value]

    def matches(self, row):
        value = row.get(self.column)
        return value is not None and value == self.value

    def __repr__(self):
        return f'Eq({self.column!r}, {self.value!r})'


class Neq(Predicate):
    def __init__(self, column, value):
        self.column = _column(column)
        self.value = value

    def to_sql(self):
        return f'{self.column} != ?', [self.value]

    def matches(self, row):
        value = row.get(self.column)
        return value is not None and value != self.value

    def __repr__(self):
        return f'Neq({self.column!r}, {self.value!r})'


class AllOf(Predicate):
    """Conjunction. An empty AllOf matches every row."""

    def __init__(self, *predicates):
        self.predicates = list(predicates)

    def add(self, predicate):
        self.predicates.append(predicate)
        return self

    def to_sql(self):
        if not self.predicates:
            return '1 = 1', []
        parts, params = [], []
        for predicate in self.predicates:
            sql, values = predicate.to_sql()
            parts.append(f'({sql})')
            params.extend(values)
        return ' AND '.join(parts), params

    def matches(self, row):
        return all(p.matches(row) for p in self.predicates)

    def __repr__(self):
        return f'AllOf({", ".join(repr(p) for p in self.predicates)})'


class AnyOf(Predicate):
    """Disjunction. An empty AnyOf matches nothing."""

    def __init__(self, *predicates):
        self.predicates = list(predicates)

    def to_sql(self):
        if not self.predicates:
            return '1 = 0', []
        parts, params = [], []
        for predicate in self.predicates:
            sql, values = predicate.to_sql()
            parts.append(f'({sql})')
            params.extend(values)
        return ' OR '.join(parts), params

    def matches(self, row):
        return any(p.matches(row) for p in self.predicates)

    def __repr__(self):
        return f'AnyOf({", ".join(repr(p) for p in self.predicates)})'
