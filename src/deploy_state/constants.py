"""Constants for deploy-state."""

# Reserved state directory at the project root (hidden, never walked)
STATE_DIR = ".deploy-state"

# Files inside STATE_DIR
CONFIG_FILE = "config.yaml"
SNAPSHOT_FILE = "state.json"
PROGRAM_INFO_FILE = "program_info.json"

# Optional gitignore-style pattern file at the project root
IGNORE_FILE = ".deployignore"

# Base names starting with this marker are hidden
HIDDEN_PREFIX = "."

# Version
STATE_VERSION = "0.1.0"
