from typing import Literal

import streamlit as st

from src.components.shared import SHARED_CSS

RowState = Literal["correct", "wrong", "missed", "neutral"]

RESULT_HTML = """
<div id="card" class="result-card">
    <div id="badge" class="badge">A</div>
    <div id="text" class="text">Choice</div>
    <div id="icon" class="status-icon"></div>
</div>
"""

RESULT_CSS = (
    SHARED_CSS
    + """
.result-card {
    display: flex;
    align-items: center;
    width: 100%;
    background: var(--bg-card);
    border: 1px solid var(--border);
    border-radius: 10px;
    padding: 12px 14px;
    color: var(--text-primary);
    opacity: 0.7;
}

.result-card.correct {
    background-color: #ecfdf5;
    border-color: #10b981;
    opacity: 1;
}
.result-card.wrong {
    background-color: #fef2f2;
    border-color: #ef4444;
    opacity: 1;
}
/* The right answer when the player missed it */
.result-card.missed {
    border-color: #10b981;
    border-style: dashed;
    opacity: 1;
}

.badge {
    background: #f0f2f6;
    color: #31333F;
    font-weight: 700;
    font-size: 13px;
    width: 26px;
    height: 26px;
    border-radius: 50%;
    display: flex;
    align-items: center;
    justify-content: center;
    margin-right: 12px;
    flex-shrink: 0;
    text-transform: uppercase;
}

.text {
    font-size: 16px;
    line-height: 1.35;
    flex: 1;
}

.status-icon {
    font-size: 16px;
    margin-left: 8px;
}
"""
)

RESULT_JS = """
export default function(component) {
    const { data, parentElement } = component;

    const card = parentElement.querySelector('#card');
    parentElement.querySelector('#badge').textContent = data.label;
    parentElement.querySelector('#text').textContent = data.text;

    const icons = { correct: '✅', wrong: '❌', missed: '👈' };
    if (icons[data.state]) {
        card.classList.add(data.state);
    }
    parentElement.querySelector('#icon').textContent = icons[data.state] || '';
}
"""

_result_row_component = st.components.v2.component(
    "result_row", html=RESULT_HTML, css=RESULT_CSS, js=RESULT_JS, isolate_styles=True
)


def row_state(choice_id: str, answer_id: str, selected_id: str | None) -> RowState:
    if choice_id == answer_id:
        return "correct" if selected_id == answer_id else "missed"
    if choice_id == selected_id:
        return "wrong"
    return "neutral"


def result_row(
    label: str, text: str, state: RowState = "neutral", key: str | None = None
) -> None:
    """Read-only choice row shown after the answer is scored."""
    _result_row_component(data={"label": label, "text": text, "state": state}, key=key)
