"""Feed processing: filtering, classification, selection, enrichment and caching."""

__all__ = [
    "cache",
    "dedupe",
    "diversity",
    "enrichment",
    "filters",
    "images",
    "llm_client",
    "normalizer",
    "pipeline",
    "scoring",
    "streaming",
    "types",
]
