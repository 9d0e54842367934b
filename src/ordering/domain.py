"""Ordering bounded context — order lifecycle, fulfillment tracking and returns.

Orders move through a fixed fulfillment chain and keep an append-only
tracking timeline. Delivered orders can open return/exchange requests
within the return window.
"""

from protean.domain import Domain

from ordering.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

ordering = Domain(name="ordering")
