# Identifier and time utilities
