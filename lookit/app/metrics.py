from __future__ import annotations

from prometheus_client import Counter, Gauge

fittings_submitted = Counter("lookit_fittings_submitted_total", "Total fitting requests submitted")
fittings_completed = Counter("lookit_fittings_completed_total", "Total fitting results persisted")
fittings_failed = Counter("lookit_fittings_failed_total", "Total fitting pipelines abandoned")
fittings_in_queue = Gauge("lookit_fittings_in_queue", "Fittings currently queued or running")
