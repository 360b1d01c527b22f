"""Application-wide constants."""

# Output filename bases; a timestamp is added on save so nothing gets clobbered
OUTPUT_PPTX_FILENAME = r"deckcodec_roundtrip.pptx"
OUTPUT_JSON_FILENAME = r"deckcodec_model.json"

# Written to the package's core properties when the model has no author
DEFAULT_AUTHOR = "PowerPoint Editor"

# Thread pool size used for media extraction, slide parsing and image preparation
DEFAULT_MAX_WORKERS = 4

# Seconds to wait for a remote image during export
DEFAULT_IMAGE_FETCH_TIMEOUT = 10.0

# Fallback for get_debug_mode() in utils
DEBUG_MODE_DEFAULT = False
DEBUG_ENV_VAR = "DECKCODEC_DEBUG"
