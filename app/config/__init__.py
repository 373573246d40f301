# =============================================================================
# Django Project Configuration Package
# =============================================================================
# Settings (config.settings, config.settings_test), root URLs and the
# ASGI/WSGI entry points.
# =============================================================================
