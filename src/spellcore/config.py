# Symmetric-delete index defaults (overridable per Engine / CLI flag)
MAX_EDIT_DISTANCE: int = 2
PREFIX_LENGTH: int = 7
COUNT_THRESHOLD: int = 1

# Lookup output policy: "top" | "closest" | "all"
DEFAULT_VERBOSITY: str = "closest"

# Storage DSN used when none is given ("memory://" or "sqlite:///path")
DEFAULT_DSN: str = "memory://"

# Frequencies are 64-bit and saturate instead of overflowing
INT64_MAX: int = 2**63 - 1

# /* ~~~ loader progress cadence (printed when SPELLCORE_VERBOSE=1) ~~~ */
PROGRESS_EVERY_LINES: int = 100_000
PROGRESS_EVERY_FILES: int = 50
