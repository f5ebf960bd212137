"""An extension whose import fails."""

raise RuntimeError("extension failed to initialize")
