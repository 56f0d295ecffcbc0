"""Community page view layer: state, fetch orchestration and reconciliation.

Nothing in here renders; a presentation layer subscribes to the page's
``ViewStore`` and calls its handlers.
"""
from .fetch import FetchOrchestrator, InitialData, IsoData, fetch_initial_data, hydrate
from .page import CommunityPage
from .reconcile import MutationKind, effects_for, reduce
from .state import ViewState, ViewStore

__all__ = [
    "FetchOrchestrator",
    "InitialData",
    "IsoData",
    "fetch_initial_data",
    "hydrate",
    "CommunityPage",
    "MutationKind",
    "effects_for",
    "reduce",
    "ViewState",
    "ViewStore",
]
