"""Teacher-side scanning: camera frames in, deduplicated mark calls out."""
