"""Package data: JSON Schemas for dyadt input documents."""
