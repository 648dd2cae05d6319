from enum import IntEnum


class FeeAmount(IntEnum):
    LOWEST = 100
    LOW = 500
    MEDIUM = 3000
    HIGH = 10000

    @property
    def label(self) -> str:
        return f"{self.value / 10000:.2f}%"


FEE_TIERS = list(FeeAmount)
