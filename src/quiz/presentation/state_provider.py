from typing import Any

import streamlit as st

from src.quiz.domain.ports import IStateProvider


class StreamlitStateProvider(IStateProvider):
    def get(self, key: str, default: Any = None) -> Any:
        return st.session_state.get(key, default)

    def set(self, key: str, value: Any) -> None:
        st.session_state[key] = value

    def delete(self, key: str) -> None:
        st.session_state.pop(key, None)

    def clear(self) -> None:
        st.session_state.clear()


class InMemoryStateProvider(IStateProvider):
    """Dict-backed provider for scripts and tests."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()
