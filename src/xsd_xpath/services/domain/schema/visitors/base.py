#!/usr/bin/env python3
"""Kind-keyed dispatch shared by every schema traversal.

A visitor owns a handler table keyed by ``NodeKind``. The defaults supply the
structural recursion (complex type -> content particle, compositor ->
items) so concrete visitors only override the kinds they care about and
register the extension kinds they understand.
"""

import logging
from typing import Any, Callable

from ..errors import UnsupportedNodeKindError
from ..model import ComplexType, ContentType, NodeKind

logger = logging.getLogger(__name__)

Handler = Callable[[Any, Any], None]


class SchemaVisitor:
    """Base visitor routing schema nodes to handlers by kind.

    The collector is an arbitrary, visitor-specific value passed unchanged
    through the default handlers.
    """

    def __init__(self):
        self._handlers: dict[NodeKind, Handler] = {
            NodeKind.ELEMENT: self.visit_element,
            NodeKind.ATTRIBUTE: self.visit_attribute,
            NodeKind.SIMPLE_TYPE: self.visit_simple_type,
            NodeKind.COMPLEX_TYPE: self.visit_complex_type,
            NodeKind.SEQUENCE: self.visit_sequence,
            NodeKind.CHOICE: self.visit_choice,
            NodeKind.ANY: self.visit_any,
        }

    def register(self, kind: NodeKind, handler: Handler) -> None:
        """Register (or replace) the handler for a node kind."""
        self._handlers[kind] = handler

    def dispatch(self, node, collector=None) -> None:
        """Route ``node`` to the handler registered for its kind.

        Raises:
            UnsupportedNodeKindError: If no handler is registered for the kind
        """
        if node is None:
            return

        kind = getattr(node, 'kind', None)
        handler = self._handlers.get(kind)
        if handler is None:
            raise UnsupportedNodeKindError(kind or type(node).__name__)

        handler(node, collector)

    def visit_element(self, element, collector) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not handle elements")

    def visit_attribute(self, attribute, collector) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not handle attributes")

    def visit_simple_type(self, simple_type, collector) -> None:
        pass

    def visit_complex_type(self, complex_type: ComplexType, collector) -> None:
        if complex_type.content_type in (ContentType.ELEMENT_ONLY, ContentType.MIXED) \
                and complex_type.content_type_particle is not None:
            self.dispatch(complex_type.content_type_particle, collector)
        else:
            self.dispatch(complex_type.particle, collector)

    def visit_sequence(self, sequence, collector) -> None:
        for item in sequence.items:
            self.dispatch(item, collector)

    def visit_choice(self, choice, collector) -> None:
        for item in choice.items:
            self.dispatch(item, collector)

    def visit_any(self, wildcard, collector) -> None:
        pass
