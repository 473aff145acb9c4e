"""Pattern recognizers over the Go node model."""
