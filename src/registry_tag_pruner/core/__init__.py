"""Registry client, manifest types and request pacing."""
