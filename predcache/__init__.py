"""Sports prediction cache with tier-gated access."""
