import os
import sys

import config

_frame_id = None

# Scopes that can be silenced: scope -> (config switch, default).
SCOPE_SWITCHES = {
    "FRAME": ("LOG_MAIN_LOOP", False),
    "MAINLOOP": ("LOG_MAIN_LOOP", False),
    "OVERLAY": ("LOG_OVERLAY", True),
}

# ANSI color codes; level colors win over scope colors.
LEVEL_COLORS = {"WARN": "33", "ERROR": "31"}
SCOPE_COLORS = {"OVERLAY": "32"}


def set_frame(frame_id):
    global _frame_id
    _frame_id = frame_id


def enabled(scope, level="INFO"):
    if level in ("WARN", "ERROR"):
        return True
    if level == "DEBUG" and not getattr(config, "LOG_DEBUG", False):
        return False
    switch = SCOPE_SWITCHES.get(scope)
    if switch is None:
        return True
    name, default = switch
    return bool(getattr(config, name, default))


def format_line(scope, msg, level="INFO"):
    frame_tag = f" f{_frame_id}" if _frame_id is not None else ""
    return f"[{level}{frame_tag} {scope}] {msg}"


def log(scope, msg, level="INFO"):
    if not enabled(scope, level):
        return
    text = format_line(scope, msg, level)
    use_color = getattr(config, "LOG_COLOR", True) and os.getenv("NO_COLOR") is None
    if use_color:
        code = LEVEL_COLORS.get(level) or SCOPE_COLORS.get(scope)
        if code:
            text = f"\x1b[{code}m{text}\x1b[0m"
    stream = sys.stderr if level in ("WARN", "ERROR") else sys.stdout
    print(text, file=stream)
