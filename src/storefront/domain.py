"""Storefront bounded context — catalogue, cart, checkout and identity.

The domain object is the composition root: every aggregate, command,
handler and repository in the ``storefront`` package registers itself here.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

configure_logging(log_dir="logs", log_file_prefix="storefront")

logger = get_logger(__name__)

storefront = Domain(name="storefront")
