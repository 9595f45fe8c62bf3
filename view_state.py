# view_state.py
"""
View state for the search → report flow.

The app keeps exactly one SearchState in st.session_state; every transition
replaces it wholesale so a new search never inherits pieces of the old one.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import MutableMapping, Optional

from data_adapter import FinancialReport
from engine import describe_error

logger = logging.getLogger(__name__)

STATE_KEY = "search_state"


class Phase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class SearchState:
    query: str = ""
    start_year: Optional[int] = None
    end_year: Optional[int] = None
    phase: Phase = Phase.IDLE
    error: Optional[str] = None
    report: Optional[FinancialReport] = None


class ViewStateController:
    """Owns the SearchState stored under STATE_KEY in `store`."""

    def __init__(self, store: MutableMapping, key: str = STATE_KEY):
        self._store = store
        self._key = key
        if not isinstance(store.get(key), SearchState):
            store[key] = SearchState()

    @property
    def state(self) -> SearchState:
        return self._store[self._key]

    def _set(self, state: SearchState) -> SearchState:
        self._store[self._key] = state
        return state

    def submit(self, ticker: str, start_year: int, end_year: int) -> bool:
        """Start a search. Returns False when the submission is ignored."""
        query = str(ticker or "").strip().upper()
        if not query:
            return False
        if self.state.phase is Phase.LOADING:
            logger.info("Ignoring search for %s while another search is in flight", query)
            return False
        if start_year > end_year:
            self._set(SearchState(
                query=query,
                start_year=start_year,
                end_year=end_year,
                phase=Phase.ERROR,
                error="Start year must not be after end year.",
            ))
            return False
        self._set(SearchState(query=query, start_year=start_year, end_year=end_year, phase=Phase.LOADING))
        return True

    def resolve(self, report: FinancialReport) -> SearchState:
        if self.state.phase is not Phase.LOADING:
            raise RuntimeError(f"Cannot store a report while {self.state.phase.value}")
        return self._set(replace(self.state, phase=Phase.SUCCESS, error=None, report=report))

    def reject(self, exc: BaseException) -> SearchState:
        if self.state.phase is not Phase.LOADING:
            raise RuntimeError(f"Cannot store an error while {self.state.phase.value}")
        return self._set(replace(self.state, phase=Phase.ERROR, error=describe_error(exc), report=None))

    def run_pending(self, client) -> SearchState:
        """Run the stored search once with `client` and record the outcome."""
        state = self.state
        if state.phase is not Phase.LOADING:
            return state
        try:
            report = client.analyze(state.query, state.start_year, state.end_year)
        except Exception as exc:
            logger.exception("Search for %s failed", state.query)
            return self.reject(exc)
        return self.resolve(report)

    def fail(self, exc: BaseException) -> SearchState:
        """Record a failure that happened before the client could be called."""
        logger.error("Search for %s could not start: %s", self.state.query, exc)
        return self.reject(exc)

    def back_to_search(self) -> SearchState:
        """Return to the search form, keeping the last query text."""
        state = self.state
        return self._set(SearchState(query=state.query, start_year=state.start_year, end_year=state.end_year))
