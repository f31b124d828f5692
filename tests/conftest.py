from __future__ import annotations

from hypothesis import HealthCheck, settings

# Property tests build many small mappings; slow CI boxes trip the
# too_slow healthcheck and per-example deadlines without any functional bug.
settings.register_profile(
    "applytime_stable",
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)

settings.load_profile("applytime_stable")
