"""
Service layer for Bar Archive.

- database: engine and session management
- snapshot_service: entity -> canonical record
- format_encoder: canonical record -> YAML/JSON bytes
- media_resolver / media_storage: image files to archive entries
- archive_writer: ZIP container with atomic finalisation
- recipe_export_service: orchestration of a full bar export
- cocktail_service / ingredient_service: write-time invariants
"""
