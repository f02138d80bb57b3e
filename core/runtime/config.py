# ==========================================
# CONFIGURATION
# ==========================================
import json
import os

CONFIG_FILE = "schemec.json"
USER_CONFIG_FILE = os.path.join("~", ".schemec", "config.json")
LIBRARY_ENV_VAR = "SCHEMEC_ENGINE_LIBRARY"
DEFAULT_LIBRARY = "libvarnam.so"

DEFAULTS = {
    "library": DEFAULT_LIBRARY,
    "output_suffix": ".vst",
}


def load_compiler_config(paths=None):
    """Load compiler configuration from the first schemec.json found."""
    if paths is None:
        paths = [CONFIG_FILE, os.path.expanduser(USER_CONFIG_FILE)]
    config = dict(DEFAULTS)
    for p in paths:
        if os.path.exists(p):
            try:
                with open(p, "r") as f:
                    loaded = json.load(f)
            except (OSError, ValueError):
                return config
            if isinstance(loaded, dict):
                config.update(loaded)
            break
    return config


def resolve_library(cli_value=None, config=None):
    """Engine library path: --library flag, then environment, then config file."""
    if cli_value:
        return cli_value
    env_value = os.environ.get(LIBRARY_ENV_VAR)
    if env_value:
        return env_value
    if config is None:
        config = load_compiler_config()
    return config.get("library") or DEFAULT_LIBRARY


def default_output_path(source_path, config=None):
    """`ml.scheme` compiles to `ml.vst` next to it unless told otherwise."""
    if config is None:
        config = load_compiler_config()
    base, _ = os.path.splitext(source_path)
    return base + config.get("output_suffix", DEFAULTS["output_suffix"])
