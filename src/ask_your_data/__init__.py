"""Ask Your Data: natural-language questions over an in-memory table."""
