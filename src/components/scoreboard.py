import streamlit as st

from src.components.shared import SHARED_CSS

SCOREBOARD_HTML = """
<div class="board">
    <div class="situation">
        <div id="inning" class="inning"></div>
        <div id="bases" class="bases"></div>
    </div>
    <div id="count" class="count">
        <div class="row"><span class="tag">B</span><span id="balls"></span></div>
        <div class="row"><span class="tag">S</span><span id="strikes"></span></div>
    </div>
</div>
"""

SCOREBOARD_CSS = (
    SHARED_CSS
    + """
.board {
    display: flex;
    justify-content: space-between;
    align-items: center;
    gap: 12px;
    background: var(--field-green);
    color: var(--chalk);
    border-radius: 10px;
    padding: 12px 16px;
}
.inning { font-size: 18px; font-weight: 700; }
.bases { font-size: 14px; opacity: 0.85; }
.count { display: flex; flex-direction: column; gap: 4px; flex-shrink: 0; }
.count.hidden { display: none; }
.row { display: flex; align-items: center; gap: 6px; }
.tag { font-weight: 700; width: 14px; }
.light {
    display: inline-block;
    width: 12px;
    height: 12px;
    border-radius: 50%;
    margin-right: 4px;
    background: rgba(255, 255, 255, 0.2);
}
.light.ball { background: var(--ball-light); }
.light.strike { background: var(--strike-light); }
"""
)

SCOREBOARD_JS = """
export default function(component) {
    const { data, parentElement } = component;

    parentElement.querySelector('#inning').textContent = data.headline;
    parentElement.querySelector('#bases').textContent = data.detail || '';

    const lights = (el, lit, total, cls) => {
        el.innerHTML = '';
        for (let i = 0; i < total; i++) {
            const dot = document.createElement('span');
            dot.className = 'light' + (i < lit ? ' ' + cls : '');
            el.appendChild(dot);
        }
    };

    const count = parentElement.querySelector('#count');
    if (data.balls === null || data.strikes === null) {
        count.classList.add('hidden');
        return;
    }
    count.classList.remove('hidden');
    lights(parentElement.querySelector('#balls'), data.balls, 3, 'ball');
    lights(parentElement.querySelector('#strikes'), data.strikes, 2, 'strike');
}
"""

_scoreboard_component = st.components.v2.component(
    "scoreboard",
    html=SCOREBOARD_HTML,
    css=SCOREBOARD_CSS,
    js=SCOREBOARD_JS,
    isolate_styles=True,
)


def scoreboard(
    headline: str,
    detail: str = "",
    count: tuple[int, int] | None = None,
    key: str | None = None,
) -> None:
    """
    Game-situation banner. `count` is (balls, strikes); omit it for questions
    that are not tied to a plate appearance.
    """
    balls, strikes = count if count else (None, None)
    _scoreboard_component(
        data={
            "headline": headline,
            "detail": detail,
            "balls": balls,
            "strikes": strikes,
        },
        key=key,
    )
