"""Toolkit descriptors for the Serpstat tool catalog."""

from .backlinks import backlinks_toolkit
from .credits import credits_toolkit
from .domains import domains_toolkit
from .keywords import keywords_toolkit
from .page_audit import page_audit_toolkit
from .projects import projects_toolkit
from .rank_tracking import rank_tracking_toolkit
from .site_audit import site_audit_toolkit
from .urls import urls_toolkit

DEFAULT_TOOLKIT_FACTORIES = [
    domains_toolkit,
    keywords_toolkit,
    backlinks_toolkit,
    urls_toolkit,
    projects_toolkit,
    rank_tracking_toolkit,
    page_audit_toolkit,
    site_audit_toolkit,
    credits_toolkit,
]

__all__ = ["DEFAULT_TOOLKIT_FACTORIES"]
