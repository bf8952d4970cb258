"""Built-in CLI commands, registered on the root app by :mod:`seqspec.app`."""
