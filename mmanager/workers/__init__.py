"""Workers package: scheduler-driven jobs (fixed-cost materialization)."""

from .materializer import FixedCostMaterializer, materialize, run_materializer  # noqa: F401
