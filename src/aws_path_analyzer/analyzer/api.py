"""Entry points wired to live AWS credentials."""

import threading
from typing import Optional

import boto3

from ..core.account import AccountContext
from .models import ReachabilityResult
from .nodes import Node
from .resolver import SimpleResolver
from .traverser import check_reachability_with_resolver


def check_reachability_default(
    source: Node,
    destination: Node,
    profile: Optional[str] = None,
    session: Optional[boto3.Session] = None,
    role_arn_pattern: Optional[str] = None,
    cancel_event: Optional[threading.Event] = None,
) -> ReachabilityResult:
    """Bidirectional check using an AccountContext built from a profile or session."""
    account_context = AccountContext(
        profile=profile, session=session, role_arn_pattern=role_arn_pattern
    )
    resolver = SimpleResolver(account_context)
    return check_reachability_with_resolver(
        source, destination, account_context, resolver, cancel_event
    )
