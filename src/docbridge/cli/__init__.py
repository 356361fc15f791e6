"""docbridge command-line interface."""
