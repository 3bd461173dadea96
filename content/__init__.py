"""Oracle-facing content: schemas, parsing, prompts, providers."""
