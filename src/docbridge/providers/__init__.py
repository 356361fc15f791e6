"""Document-generation services shipped with docbridge."""
