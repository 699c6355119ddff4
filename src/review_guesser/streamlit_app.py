"""Streamlit web UI for review-guesser."""

from typing import MutableMapping, Optional

import streamlit as st

from review_guesser.config import Settings
from review_guesser.core import ReviewGuesser, build_policy, store_url
from review_guesser.models import LAYOUTS, MODES, RoundResult
from review_guesser.selection import SelectionPolicy
from review_guesser.storage import KeyValueStorage

_MODE_LABELS = {"balanced": "Balanced", "raw": "Raw"}
_LAYOUT_LABELS = {"ranges": "Ranges", "exact": "Exact"}

ROUND_KEY = "round"
RECORDED_ROUND_KEY = "recorded_round"
APP_ID_KEY = "next_app_id"


class SessionStateStorage(KeyValueStorage):
    """Session-scoped storage living in ``st.session_state``."""

    PREFIX = "storage:"

    def get(self, key: str) -> Optional[str]:
        return st.session_state.get(self.PREFIX + key)

    def set(self, key: str, value: str) -> None:
        st.session_state[self.PREFIX + key] = value

    def remove(self, key: str) -> None:
        st.session_state.pop(self.PREFIX + key, None)


def start_round(state: MutableMapping, app_id: int) -> None:
    state[APP_ID_KEY] = app_id
    state[ROUND_KEY] = state.get(ROUND_KEY, 0) + 1


def round_open(state: MutableMapping) -> bool:
    """True while the current game has no recorded outcome yet."""
    return ROUND_KEY in state and state.get(RECORDED_ROUND_KEY) != state[ROUND_KEY]


def record_round(state: MutableMapping, guesser: ReviewGuesser, is_correct: bool) -> Optional[RoundResult]:
    """Record the outcome of the current game once; later calls are ignored."""
    if not round_open(state):
        return None
    state[RECORDED_ROUND_KEY] = state[ROUND_KEY]
    return guesser.record_outcome(is_correct)


@st.cache_resource
def _settings() -> Settings:
    return Settings.from_env()


@st.cache_resource
def _policy() -> SelectionPolicy:
    # One catalog cache for the whole server process.
    return build_policy(_settings())


def _guesser() -> ReviewGuesser:
    if "guesser" not in st.session_state:
        st.session_state["guesser"] = ReviewGuesser.from_settings(
            _settings(), session_storage=SessionStateStorage(), policy=_policy()
        )
    return st.session_state["guesser"]


def main():
    st.set_page_config(page_title="Review Guesser", layout="centered")
    st.title("Review Guesser")
    st.markdown("Guess how a Steam game was reviewed, then move on to the **next game**.")

    guesser = _guesser()
    prefs = guesser.preferences
    state = st.session_state

    # Sidebar
    with st.sidebar:
        st.header("Settings")
        mode = st.selectbox(
            "Next mode",
            MODES,
            index=MODES.index(prefs.get_mode()),
            format_func=_MODE_LABELS.get,
        )
        prefs.set_mode(mode)

        layout = st.selectbox(
            "Guess style",
            LAYOUTS,
            index=LAYOUTS.index(prefs.get_layout()),
            format_func=_LAYOUT_LABELS.get,
        )
        prefs.set_layout(layout)

    # Next game
    if st.button("Next", type="primary"):
        with st.spinner("Loading catalog..."):
            start_round(state, guesser.next_app_id(mode))

    if APP_ID_KEY in state:
        url = store_url(state[APP_ID_KEY])
        st.markdown(f"Next game: [{url}]({url})")

    # Round outcome
    locked = not round_open(state)
    col1, col2 = st.columns(2)
    if col1.button("I guessed right", disabled=locked):
        record_round(state, guesser, True)
        st.rerun()
    if col2.button("I guessed wrong", disabled=locked):
        record_round(state, guesser, False)
        st.rerun()

    # Metrics
    lifetime = guesser.stats.get_lifetime()
    col1, col2, col3 = st.columns(3)
    col1.metric("Current Streak", guesser.stats.get_streak())
    col2.metric("Lifetime", str(lifetime))
    col3.metric("Accuracy", f"{lifetime.accuracy:.0%}")

    if st.button("Clear stats"):
        guesser.clear_lifetime()
        st.rerun()


if __name__ == "__main__":
    main()
