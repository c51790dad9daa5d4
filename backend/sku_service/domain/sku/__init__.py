"""SKU domain: status machine, code generation, uniqueness and search rules."""

from .code_generator import (
    SequenceCounters,
    SequenceOverflowError,
    SkuCodeGenerator,
    format_code,
    parse_sequence,
)
from .exceptions import (
    DuplicateKeyError,
    InvalidArgumentError,
    SkuNotFoundError,
    SkuServiceError,
)
from .models import CATEGORY_CODES, Page, PageRequest, SkuSearchCriteria, SortOrder, parse_sort
from .ports import SkuRepositoryPort
from .predicates import build_filter_predicate, build_search_predicate
from .status import SkuStatus, StateTransitionError, can_transition, validate_transition
from .uniqueness import UniquenessGuard

__all__ = [
    # Code generation
    "SequenceCounters",
    "SequenceOverflowError",
    "SkuCodeGenerator",
    "format_code",
    "parse_sequence",
    # Errors
    "DuplicateKeyError",
    "InvalidArgumentError",
    "SkuNotFoundError",
    "SkuServiceError",
    # Value objects
    "CATEGORY_CODES",
    "Page",
    "PageRequest",
    "SkuSearchCriteria",
    "SortOrder",
    "parse_sort",
    # Ports
    "SkuRepositoryPort",
    # Predicates
    "build_filter_predicate",
    "build_search_predicate",
    # Status
    "SkuStatus",
    "StateTransitionError",
    "can_transition",
    "validate_transition",
    # Uniqueness
    "UniquenessGuard",
]
