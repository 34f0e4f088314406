"""Building blocks for policies: option validation, time coercion, codec and signing."""
