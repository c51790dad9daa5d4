"""Prometheus metrics for the SKU service."""

from prometheus_client import Counter, Histogram

skus_created_total = Counter(
    "sku_created_total",
    "Total SKUs created",
    ["category"],
)

sku_batch_size = Histogram(
    "sku_batch_size",
    "Number of SKUs per successful batch create",
    buckets=[1, 5, 10, 25, 50, 75, 100],
)

sku_updates_total = Counter(
    "sku_updates_total",
    "Total SKU updates",
    ["kind"],  # kind: full|partial
)

skus_discontinued_total = Counter(
    "sku_discontinued_total",
    "Total SKUs soft deleted (status set to DISCONTINUED)",
)

duplicate_rejections_total = Counter(
    "sku_duplicate_rejections_total",
    "Writes rejected because a natural key already exists",
    ["field"],  # field: upc|sku_code
)

lookup_misses_total = Counter(
    "sku_lookup_misses_total",
    "Lookups that found no SKU",
    ["key"],  # key: id|sku_code|upc
)
