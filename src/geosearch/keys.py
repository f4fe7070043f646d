"""Key names the control reacts to."""

ENTER_KEY = "Enter"
ESCAPE_KEY = "Escape"
ARROW_UP_KEY = "ArrowUp"
ARROW_DOWN_KEY = "ArrowDown"
ARROW_LEFT_KEY = "ArrowLeft"
ARROW_RIGHT_KEY = "ArrowRight"

NAVIGATION_KEYS = frozenset({ENTER_KEY, ARROW_UP_KEY, ARROW_DOWN_KEY})

# Keys that never trigger an autocomplete search
SPECIAL_KEYS = frozenset(
    {
        ENTER_KEY,
        ESCAPE_KEY,
        ARROW_UP_KEY,
        ARROW_DOWN_KEY,
        ARROW_LEFT_KEY,
        ARROW_RIGHT_KEY,
    }
)
