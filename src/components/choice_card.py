import streamlit as st

from src.components.shared import SHARED_CSS

CHOICE_HTML = """
<button id="btn" class="choice-card">
    <div id="badge" class="badge">A</div>
    <div id="text" class="text">Choice</div>
</button>
"""

CHOICE_CSS = (
    SHARED_CSS
    + """
.choice-card {
    font-family: "Inter";
    display: flex;
    align-items: center;
    width: 100%;
    min-height: 52px;
    background: var(--bg-card);
    border: 1px solid var(--border);
    border-radius: 10px;
    padding: 12px 14px;
    cursor: pointer;
    text-align: left;
    color: var(--text-primary);
    transition: transform 0.1s;
}

.choice-card:active {
    border-color: var(--field-green);
    transform: scale(0.99);
}

.badge {
    background: var(--field-green);
    color: var(--chalk);
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
    font-weight: 600;
    line-height: 1.35;
    word-wrap: break-word;
}
"""
)

CHOICE_JS = """
export default function(component) {
    const { data, setTriggerValue, parentElement } = component;

    const btn = parentElement.querySelector('#btn');
    parentElement.querySelector('#badge').textContent = data.label;
    parentElement.querySelector('#text').textContent = data.text;

    btn.onclick = () => {
        setTriggerValue('clicked', data.choiceId);
    };
}
"""

_choice_card_component = st.components.v2.component(
    "choice_card", html=CHOICE_HTML, css=CHOICE_CSS, js=CHOICE_JS, isolate_styles=True
)


def choice_card(
    choice_id: str, label: str, text: str, key: str | None = None
) -> str | None:
    """
    Renders one answer choice. Returns choice_id if it was tapped.
    """
    result = _choice_card_component(
        data={"choiceId": choice_id, "label": label, "text": text},
        key=key,
        on_clicked_change=lambda: None,
    )
    clicked = result.clicked
    return str(clicked) if clicked is not None else None
