from dataclasses import dataclass, fields


@dataclass(frozen=True)
class SimilarityProfile:
    """Per-domain similarity thresholds.

    Convention (not enforced): auto_apply >= confirm >= propagate >= group > reject.
    A threshold of 0 for propagate, group or reject disables that decision.
    """

    auto_apply: float
    confirm: float
    propagate: float = 0.0
    group: float = 0.0
    reject: float = 0.0

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not 0.0 <= value <= 1.0:
                msg = f"{f.name} must be within [0, 1], got {value}"
                raise ValueError(msg)
