"""Constants for minigit."""

# Metadata store directory (inside the working tree root)
MINIGIT_DIR = ".minigit"

# Store records (inside MINIGIT_DIR)
TRACKED_FILE = "tracked_files"
VERSION_FILE = "VERSION"
CONFIG_FILE = "config.yaml"
LOCK_FILE = "lock"

# Commit directories are named COMMIT_<version>
COMMIT_PREFIX = "COMMIT_"
COMMIT_META = "meta"

# Version
MINIGIT_VERSION = "0.1.0"
