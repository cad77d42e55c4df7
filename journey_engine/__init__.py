"""Load-journey engine for drayage dispatch."""
