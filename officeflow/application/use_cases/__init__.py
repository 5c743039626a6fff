"""Use cases: each owns its transaction boundary over the repositories it is given."""
