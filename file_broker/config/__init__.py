"""Configuration layer: environment-driven settings and client factories."""
