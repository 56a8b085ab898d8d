"""Query-string parsing: typed filter predicates and pagination."""
from pocket_broker.query.filters import (Column, Equals, InSet, Like,
                                         Predicate, Range, TransactionQuery,
                                         parse_transaction_query, to_clause,
                                         where_clauses)
from pocket_broker.query.pagination import (LimitOffset, PageRequest,
                                            paginate, parse_id, parse_int,
                                            parse_limit_offset,
                                            parse_optional_id,
                                            parse_page_number,
                                            parse_page_request, total_pages)

__all__ = [
    "Column",
    "Equals",
    "InSet",
    "Like",
    "LimitOffset",
    "PageRequest",
    "Predicate",
    "Range",
    "TransactionQuery",
    "paginate",
    "parse_id",
    "parse_int",
    "parse_limit_offset",
    "parse_optional_id",
    "parse_page_number",
    "parse_page_request",
    "parse_transaction_query",
    "to_clause",
    "total_pages",
    "where_clauses",
]
