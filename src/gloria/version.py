"""Project metadata."""

TITLE = "Gloria"

VERSION = "1.0.0"

# Filled in by release tooling.
BUILD_TIME = ""
GIT_HASH = ""
