"""passcraft -- Streamlit web interface."""

import streamlit as st

from passcraft import (
    MAX_COUNT,
    MAX_LENGTH,
    MIN_LENGTH,
    STRENGTH_LABELS,
    GenerationConfig,
    GenerationError,
    estimate_entropy,
    estimate_strength,
    generate_batch,
)
from passcraft.storage import HistoryStore, PreferenceStore

# ── Lucide icons (from lucide.dev) ────────────────────────────────────────

_LUCIDE = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="{s}" height="{s}" '
    'viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" '
    'stroke-linecap="round" stroke-linejoin="round">{paths}</svg>'
)

ICON_KEY_ROUND = _LUCIDE.format(s=32, paths=(
    '<path d="M2.586 17.414A2 2 0 0 0 2 18.828V21a1 1 0 0 0 1 1h3'
    'a1 1 0 0 0 1-1v-1a1 1 0 0 1 1-1h1a1 1 0 0 0 1-1v-1'
    'a1 1 0 0 1 1-1h.172a2 2 0 0 0 1.414-.586l.814-.814'
    'a6.5 6.5 0 1 0-4-4z"/>'
    '<circle cx="16.5" cy="7.5" r=".5" fill="currentColor"/>'
))

ICON_HISTORY = _LUCIDE.format(s=20, paths=(
    '<path d="M3 12a9 9 0 1 0 9-9 9.75 9.75 0 0 0-6.74 2.74L3 8"/>'
    '<path d="M3 3v5h5"/><path d="M12 7v5l4 2"/>'
))

STRENGTH_COLORS = ["#d32f2f", "#f57c00", "#fbc02d", "#388e3c"]

# ── Page config ───────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Password Generator",
    page_icon="\U0001f511",
    layout="centered",
)

prefs = PreferenceStore()
history = HistoryStore()

# Widgets read their initial values from session state, seeded once per
# session from the saved preferences.
_WIDGET_KEYS = [
    "length", "count", "pronounceable", "exclude_ambiguous", "allow_numbers",
    "allow_specials", "restrict_confusing_chars", "avoid_o_zero_together",
]


def _seed_state(config: GenerationConfig) -> None:
    for key in _WIDGET_KEYS:
        st.session_state[key] = getattr(config, key)


def _reset_preferences() -> None:
    _seed_state(prefs.reset())


if "length" not in st.session_state:
    saved = prefs.load()
    if not MIN_LENGTH <= saved.length <= MAX_LENGTH:
        saved = GenerationConfig()
    _seed_state(saved)

# ── Header ────────────────────────────────────────────────────────────────

st.markdown(
    f'<h1 style="display:flex;align-items:center;gap:10px">'
    f'{ICON_KEY_ROUND} Password Generator</h1>',
    unsafe_allow_html=True,
)
st.caption(
    "Passwords are generated locally with a cryptographically secure "
    "random source. Use the copy button on a result to copy it."
)

# ── Options ───────────────────────────────────────────────────────────────

col1, col2 = st.columns(2)
with col1:
    st.slider("Length", MIN_LENGTH, MAX_LENGTH, key="length")
    st.number_input(
        "How many passwords?", min_value=1, max_value=MAX_COUNT, step=1,
        key="count",
    )
    st.button(
        "Reset saved preferences", on_click=_reset_preferences,
        help="Resets options and clears saved preferences",
    )
with col2:
    st.checkbox("Pronounceable password (e.g. “Bamiro7!”)", key="pronounceable")
    st.checkbox("Exclude ambiguous characters (O, 0, I, l, 1)", key="exclude_ambiguous")
    st.checkbox("Include Numbers", key="allow_numbers")
    st.checkbox("Include Special Characters", key="allow_specials")
    st.checkbox("Exclude multiple of: i, l, 1", key="restrict_confusing_chars")
    st.checkbox("Avoid o/O and 0 together", key="avoid_o_zero_together")

config = GenerationConfig(**{key: st.session_state[key] for key in _WIDGET_KEYS})

# ── Strength ──────────────────────────────────────────────────────────────

label = estimate_strength(config)
if label:
    level = STRENGTH_LABELS.index(label)
    st.markdown(
        f"**Password strength:** <span style='color:{STRENGTH_COLORS[level]}'>"
        f"{label}</span> &nbsp;·&nbsp; "
        f"{estimate_entropy(config):.1f} bits of entropy",
        unsafe_allow_html=True,
    )
    st.progress((level + 1) / len(STRENGTH_LABELS))

# ── Generate ──────────────────────────────────────────────────────────────

if st.button("Generate Password", type="primary", use_container_width=True):
    try:
        passwords = generate_batch(config)
    except GenerationError as exc:
        st.error(str(exc))
    else:
        prefs.save(config)
        history.add(passwords)
        st.code("\n".join(passwords), language=None)

st.caption(
    "Tip: For best security, use longer passwords and include "
    "numbers + special characters."
)

# ── History ───────────────────────────────────────────────────────────────

st.divider()
head, clear_col = st.columns([4, 1])
with head:
    st.markdown(
        f'<p style="display:flex;align-items:center;gap:6px">'
        f'{ICON_HISTORY} <strong>Recent Passwords</strong></p>',
        unsafe_allow_html=True,
    )

entries = history.entries()
with clear_col:
    if st.button("Clear history", disabled=not entries):
        history.clear()
        entries = []

if not entries:
    st.caption("No history yet. Generate a password to see it here.")
for entry in entries:
    st.code(entry.value, language=None)
