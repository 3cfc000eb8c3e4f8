"""Response handling core.

Composition:
    - `dispatcher`: stream-vs-JSON decision for chat/steps responses.
    - `normalizer`: `{template, title?}` extraction for classify responses.
    - `result_types`: result value objects.
    - `errors`: exception hierarchy.
    - `framing`: optional line/SSE/NDJSON framing over streamed bodies.

Package import is side-effect free.
"""
