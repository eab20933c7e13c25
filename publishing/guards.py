"""
Ownership checks for article and comment mutations.

Callers load the resource first so a missing record is reported as NotFound
before ownership is considered.
"""

import logging

from .exceptions import Forbidden

logger = logging.getLogger(__name__)


def is_owner(resource, identity):
    return identity is not None and resource.author_id == identity.user_id


def assert_owner(resource, identity):
    if not is_owner(resource, identity):
        noun = resource._meta.verbose_name
        logger.warning(
            f"Rejected mutation of {noun} {resource.pk} by user "
            f"{identity.user_id if identity else None}"
        )
        raise Forbidden(f"You can only modify your own {noun}s")
