import json
from rt.common.logger import log
from rt.common.setup import PATHS

#region === Helpers and Paths ===

SETTINGS_PATH = PATHS.data / "settings.json"

# Default values for every operator setting. Race data is deliberately absent, nothing about a race outlives the
# process.
_SETTINGS_DEFAULTS = {
    "confirm_reset": True,
    "confirm_delete": True,
    "always_on_top": False,
    "refresh_interval_ms": 31,
    "csv_separator": ";",
    "clipboard_separator": "\t",
    "font": "Consolas",
}
# Bounds for the display refresh, anything faster is wasted work and anything slower looks broken.
_MIN_REFRESH_MS = 10
_MAX_REFRESH_MS = 1000

# Helper to return a truly fresh, default settings dict.
def build_default_settings():
    return dict(_SETTINGS_DEFAULTS)

# Checks a single loaded value against its default's type, plus a few value rules.
def _is_valid(key, value):
    default = _SETTINGS_DEFAULTS[key]
    # bool is an int subclass, so check it first and strictly
    if isinstance(default, bool) or isinstance(value, bool):
        return isinstance(value, bool) and isinstance(default, bool)
    if not isinstance(value, type(default)):
        return False
    if key == "refresh_interval_ms":
        return _MIN_REFRESH_MS <= value <= _MAX_REFRESH_MS
    if key in ("csv_separator", "clipboard_separator"):
        return len(value) == 1 and value not in "\r\n"
    return True

#endregion === Helpers and Paths ===

#region === Saving and Loading Settings ===

# Loads settings from PATHS.data / settings.json, filling in defaults for anything missing or malformed.
def load_settings():
    try:
        if not SETTINGS_PATH.exists():
            log.info("No existing settings.json found, loading default settings.")
            return build_default_settings()

        with open(SETTINGS_PATH, "r", encoding="utf-8") as f:
            loaded = json.load(f)
        if not isinstance(loaded, dict):
            log.warning(f"settings.json at '{SETTINGS_PATH}' is not an object, loading default settings.")
            return build_default_settings()

        settings = build_default_settings()
        defaulted_values = set()
        for key in _SETTINGS_DEFAULTS:
            if key in loaded and _is_valid(key, loaded[key]):
                settings[key] = loaded[key]
            else:
                defaulted_values.add(key)

        unknown = set(loaded) - set(_SETTINGS_DEFAULTS)
        if unknown:
            log.debug(f"Dropping unknown settings keys: {', '.join(sorted(unknown))}")

        if defaulted_values:
            log.warning(f"Loaded settings from '{SETTINGS_PATH}', but with missing or invalid values that were "
                        f"defaulted: {', '.join(sorted(defaulted_values))}")
        else:
            log.info(f"Successfully loaded settings from '{SETTINGS_PATH}'.")
        return settings
    # Fall back to defaults in case of error, but warn in log
    except (json.JSONDecodeError, OSError, UnicodeDecodeError):
        log.warning("Ran into an error while trying to load settings.json, falling back to default settings.",exc_info=True)
        return build_default_settings()

# Write the given settings to disk under PATHS.data / settings.json. Only known keys are written.
def save_settings(settings):
    cleaned = {key: settings.get(key, default) for key, default in _SETTINGS_DEFAULTS.items()}
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    with open(SETTINGS_PATH, "w", encoding="utf-8") as f:
        json.dump(cleaned, f, indent=2)
    log.info(f"Successfully saved settings to '{SETTINGS_PATH}'")

#endregion === Saving and Loading Settings ===
