"""Named step sequence for the lookup table demo flow."""

from lookup_client.pipeline.steps import (
    DEFAULT_ADDRESSES,
    STEP_NAMES,
    DemoContext,
    StepResult,
    run_steps,
)

__all__ = ["DEFAULT_ADDRESSES", "STEP_NAMES", "DemoContext", "StepResult", "run_steps"]
