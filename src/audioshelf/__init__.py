# ABOUTME: audioshelf - an audiobook library tracker with series gap detection.
# ABOUTME: Package root; see audioshelf.cli for the command-line entry point.
