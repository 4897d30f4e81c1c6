# --- Inline CSS/JS in Python Components ---
# Streamlit Components V2 accepts code as strings, so each widget keeps its
# HTML/CSS/JS next to its Python wrapper. No frontend build step.
# -------------------------------------------

SHARED_CSS = """
@import url('https://fonts.googleapis.com/css2?family=Inter:wght@400;600;700&display=swap');

:host {
    display: block;
    width: 100%;
    font-family: "Inter", -apple-system, BlinkMacSystemFont, Roboto, sans-serif;
    box-sizing: border-box;
    font-size: 16px;
    line-height: 1.5;
    color: var(--text-primary);
    -webkit-font-smoothing: antialiased;

    --bg-card: #ffffff;
    --text-primary: #111827;
    --border: #e0e0e0;
    --field-green: #1f7a3a;
    --chalk: #f8fafc;
    --ball-light: #22c55e;
    --strike-light: #facc15;
}
* {
    box-sizing: border-box;
    margin: 0;
    padding: 0;
    -webkit-tap-highlight-color: transparent;
}

@media (prefers-color-scheme: dark) {
    :host {
        --bg-card: #292524;
        --text-primary: #fafaf9;
        --border: #44403c;
    }
}
"""
