"""Static analysis of template trees: traversal and structural validation."""

from xmlit.analysis.validator import SlotTable, Validator, validate
from xmlit.analysis.visitor import is_structured, iter_slots, visit_children, walk

__all__ = [
    "SlotTable",
    "Validator",
    "is_structured",
    "iter_slots",
    "validate",
    "visit_children",
    "walk",
]
