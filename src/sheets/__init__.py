"""Sheet-level workflows built on the engines: review, templates, diffs."""
