"""Artifact-generation pipeline: filter, stage, archive, compile, compress."""
