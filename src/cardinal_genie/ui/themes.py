"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, etc.)
- Dark/light mode configuration

To add a new theme, define it here and register in the app.
"""

from textual.theme import Theme

# Cardinal red on near-black, with silver supporting tones
CARDINAL = Theme(
    name="cardinal",
    primary="#c2001f",      # Cardinal red - main accent
    secondary="#b3b3b3",    # Silver - secondary accent
    accent="#f25c74",       # Light red - highlights
    foreground="#ececec",
    background="#0b0b0d",
    success="#2eb872",
    warning="#f2a33a",
    error="#e6193a",
    surface="#151518",
    panel="#111114",
    dark=True,
    variables={
        "block-cursor-foreground": "#0b0b0d",
        "block-cursor-background": "#f25c74",
        "block-cursor-text-style": "bold",
        "block-hover-background": "#2a2a30 20%",

        "input-cursor-background": "#ececec",
        "input-cursor-foreground": "#0b0b0d",
        "input-selection-background": "#c2001f 30%",

        "border": "#3a3a42",
        "border-blurred": "#2a2a30",

        "scrollbar": "#2a2a30",
        "scrollbar-hover": "#3a3a42",
        "scrollbar-active": "#c2001f",
        "scrollbar-background": "#111114",
        "scrollbar-corner-color": "#111114",

        "footer-foreground": "#b3b3b3",
        "footer-background": "#0b0b0d",
        "footer-key-foreground": "#f25c74",
        "footer-key-background": "#2a2a30",
        "footer-description-foreground": "#9a9aa3",

        "text-muted": "#7a7a83",
        "text-disabled": "#3a3a42",

        "link-color": "#f25c74",
        "link-style": "underline",
        "link-color-hover": "#ff8a9c",
        "link-style-hover": "bold",

        "button-foreground": "#ececec",
        "button-color-foreground": "#0b0b0d",
        "button-focus-text-style": "bold reverse",
    },
)
