"""Hypothesis profiles for the property tests.

``HYPOTHESIS_PROFILE`` selects a profile explicitly; otherwise ``ci`` is used
when the ``CI`` variable is set and ``dev`` everywhere else.
"""
from __future__ import annotations

import os

from hypothesis import HealthCheck, settings

settings.register_profile(
    "dev",
    settings(
        max_examples=50,
        deadline=None,
        suppress_health_check=(HealthCheck.too_slow,),
    ),
)
settings.register_profile(
    "ci",
    settings(
        max_examples=200,
        deadline=None,
        suppress_health_check=(HealthCheck.too_slow,),
    ),
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE") or ("ci" if os.getenv("CI") else "dev"))
